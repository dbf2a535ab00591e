"""YAML serialization and persistence of Swagger documents."""

from pathlib import Path
from typing import Any, Dict, Union

import aiofiles
import yaml

from wsdl2swagger.config.logging import get_logger
from wsdl2swagger.exceptions import WriteError

logger = get_logger(__name__)


class _NoAliasDumper(yaml.SafeDumper):
    """Safe dumper that never emits anchors or aliases."""

    def ignore_aliases(self, data: Any) -> bool:
        return True


class DocumentWriter:
    """Writes one ``<service>.yaml`` file per Swagger document."""

    def __init__(self, output_dir: Union[str, Path] = "."):
        self.output_dir = Path(output_dir)

    def output_path(self, service_name: str) -> Path:
        return self.output_dir / f"{service_name}.yaml"

    def serialize(self, document: Dict[str, Any]) -> str:
        """Render a document as block-style YAML, keeping key order."""
        return yaml.dump(
            document,
            Dumper=_NoAliasDumper,
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
        )

    async def write(self, service_name: str, document: Dict[str, Any]) -> Path:
        """Serialize and write a document, overwriting any existing file.

        Raises:
            WriteError: If the file cannot be written
        """
        path = self.output_path(service_name)
        content = self.serialize(document)

        try:
            async with aiofiles.open(path, "w", encoding="utf-8") as f:
                await f.write(content)
        except OSError as e:
            raise WriteError(
                f"Failed to write {path}: {e}",
                {"path": str(path), "error_type": type(e).__name__},
            )

        logger.debug("Wrote YAML document", path=str(path), size=len(content))
        return path
