"""
Extractor - the single entry point for record, search and icon extraction.

Ties an archive and a schema provider together:

    archive = LooseArchive(game_path)
    provider = ExdSchemaProvider(schema_path)
    extractor = Extractor(archive, provider)

    record = extractor.get("Action", 7)
    matches = extractor.search("Status", "Regen")
    icon = extractor.icon(405)

Every method raises ExtractError subclasses only. Unexpected failures from
the file system or the binary formats are wrapped in Unknown.
"""

import logging
import struct
from contextlib import contextmanager
from typing import Iterator, Optional

import yaml

from xivextract.archive.base import ArchiveReader
from xivextract.archive.exd import SheetFormatError
from xivextract.archive.loose import LooseArchive
from xivextract.config import ExtractorConfig
from xivextract.errors import ExtractError, GameNotFound, IconNotFound, Unknown
from xivextract.excel.sestring import SeStringError
from xivextract.icons.decoder import decode_icon
from xivextract.icons.paths import icon_path
from xivextract.icons.texture import TextureRecord
from xivextract.results import ActionList, GameVersion, Icon, Record, SearchResults
from xivextract.schema.providers import (
    MalformedDefinition,
    SchemaProvider,
    UnsupportedDefinition,
    create_provider,
)
from xivextract.schema.resolver import SchemaResolver
from xivextract.sheets.actions import Role, job_actions, role_actions
from xivextract.sheets.links import LinkJoiner
from xivextract.sheets.projector import RecordProjector
from xivextract.sheets.registry import get_sheet_spec
from xivextract.sheets.search import SearchMatcher

logger = logging.getLogger(__name__)

# Lower-level failures that are reported as Unknown
WRAPPED_ERRORS = (
    OSError,
    struct.error,
    yaml.YAMLError,
    SheetFormatError,
    SeStringError,
    UnsupportedDefinition,
    MalformedDefinition,
)


class Extractor:
    """
    Extracts records and icons from one archive.

    Args:
        archive: game data
        provider: schema definitions
        schema_version: schema version to read; defaults to the archive's
        debug: keep tracebacks of wrapped errors in ``Unknown.trace``
    """

    def __init__(self, archive: ArchiveReader, provider: SchemaProvider,
                 schema_version: Optional[str] = None, debug: bool = False):
        self.archive = archive
        self.provider = provider
        self.debug = debug
        self.resolver = SchemaResolver(provider, archive, schema_version)
        self.joiner = LinkJoiner(archive, self.resolver)

    @classmethod
    def from_config(cls, config: ExtractorConfig) -> "Extractor":
        """
        Open the archive and schemas named by a configuration.

        Raises:
            GameNotFound: no game path is configured, or it is not a game folder
        """
        if config.game_path is None:
            raise GameNotFound()
        archive = LooseArchive(config.game_path, config.language)
        provider = create_provider(config.schema_format, config.schema_path)
        logger.info(f"Using {config.schema_format} schemas from {config.schema_path}")
        return cls(archive, provider, config.schema_version, config.debug)

    @contextmanager
    def _errors(self) -> Iterator[None]:
        try:
            yield
        except ExtractError:
            raise
        except WRAPPED_ERRORS as e:
            logger.debug(f"Wrapping {type(e).__name__}: {e}")
            raise Unknown(e, capture_trace=self.debug) from e

    # =========================================================================
    # Records
    # =========================================================================

    def version(self) -> str:
        """The schema version in use."""
        return self.resolver.version

    def game_version(self) -> GameVersion:
        """The version of the game files, whatever schema version is pinned."""
        return GameVersion(self.archive.version())

    def get(self, sheet: str, row_id: int) -> Record:
        """
        Fetch one row, projected and with its links merged in.

        Curated sheets produce their declared columns (aliased, in declared
        order) followed by linked columns. Any other sheet produces every
        schema field.

        Raises:
            SheetNotFound, RowNotFound, ColumnNotFound, NoIndex,
            UnsupportedSheet, VersionNotFound, Unknown
        """
        with self._errors():
            spec = get_sheet_spec(sheet)
            layout = self.resolver.layout(sheet)
            row = self.archive.row(sheet, row_id)

            values = RecordProjector(layout, spec).project(row)
            if spec is not None:
                self.joiner.join(row, layout, spec, values)

            logger.debug(f"Extracted {sheet}#{row_id}: {len(values)} values")
            return Record(sheet, row_id, values)

    def search(self, sheet: str, query: str) -> SearchResults:
        """
        Search a sheet's text columns for ``query``.

        Raises:
            SheetNotFound, ColumnNotFound, UnsupportedSheet, VersionNotFound, Unknown
        """
        with self._errors():
            layout = self.resolver.layout(sheet)
            matcher = SearchMatcher(self.archive, layout, get_sheet_spec(sheet))
            return SearchResults(sheet, query, matcher.search(query))

    def job_actions(self, job_id: int, names: bool = False) -> ActionList:
        """
        Raises:
            JobNotFound
        """
        with self._errors():
            return job_actions(self.archive, self.resolver, job_id, names)

    def role_actions(self, role: Role, names: bool = False) -> ActionList:
        with self._errors():
            return role_actions(self.archive, self.resolver, role, names)

    # =========================================================================
    # Icons
    # =========================================================================

    def icon(self, icon_id: int) -> Icon:
        """
        Fetch and decode an icon.

        Raises:
            IconNotFound: no texture at the icon's path
            UnsupportedIconFormat: the texture's pixel format has no decoder
            Unknown: the texture is malformed or empty
        """
        path = icon_path(icon_id)
        with self._errors():
            try:
                raw = self.archive.resource(path)
            except FileNotFoundError:
                raise IconNotFound(path) from None

            texture = TextureRecord.from_bytes(raw, path)
            if not texture.width or not texture.height:
                # PNG has no encoding for an empty image
                raise Unknown(ValueError(
                    f"{path} is an empty {texture.width}x{texture.height} texture"
                ))
            rgba = decode_icon(texture)
            logger.debug(f"Decoded icon {icon_id} from {path} ({texture.width}x{texture.height})")
            return Icon(icon_id, path, texture.width, texture.height, rgba)
