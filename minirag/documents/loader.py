"""Plain-text document loading."""

from pathlib import Path

from minirag.documents.models import Document
from minirag.exceptions import DocumentError, ErrorCode
from minirag.logging_config import get_logger

logger = get_logger(__name__)


class TextFileLoader:
    """Loader for UTF-8 plain text files.

    Each file becomes one Document whose metadata records the file name,
    its path and ``type="text"``.
    """

    SUPPORTED_EXTENSIONS = {".txt"}

    def __init__(self, encoding: str = "utf-8") -> None:
        """Initialize the text file loader.

        Args:
            encoding: Text encoding to use when reading files.
        """
        self.encoding = encoding

    def load(self, source: str | Path, index: int = 0) -> Document:
        """Load a text file as a document.

        Args:
            source: Path to the text file.
            index: Position of the file in its batch, used in the document id.

        Returns:
            Document with file content.

        Raises:
            DocumentError: If file cannot be read.
        """
        path = Path(source) if isinstance(source, str) else source

        if not path.is_file():
            raise DocumentError(
                f"File not found: {path}",
                code=ErrorCode.DOCUMENT_NOT_FOUND,
                details={"path": str(path)},
            )

        try:
            content = path.read_text(encoding=self.encoding)
        except UnicodeDecodeError as e:
            raise DocumentError(
                f"Failed to decode file: {path}",
                code=ErrorCode.DOCUMENT_DECODE_ERROR,
                details={"path": str(path), "encoding": self.encoding, "error": str(e)},
            ) from e
        except OSError as e:
            raise DocumentError(
                f"Failed to read file: {path}",
                code=ErrorCode.DOCUMENT_READ_ERROR,
                details={"path": str(path), "error": str(e)},
            ) from e

        return Document(
            id=f"{path.name}_{index}",
            content=content,
            filename=path.name,
            metadata={
                "filename": path.name,
                "path": str(path),
                "type": "text",
            },
        )

    def supports(self, source: str | Path) -> bool:
        """Check if source is a supported text file.

        Args:
            source: Path to check.

        Returns:
            True if file has a supported extension.
        """
        path = Path(source) if isinstance(source, str) else source
        return path.suffix.lower() in self.SUPPORTED_EXTENSIONS

    def load_directory(self, directory: str | Path) -> list[Document]:
        """Load every supported file directly inside ``directory``.

        Subdirectories are not descended into. Files that cannot be read are
        logged and skipped.

        Args:
            directory: Directory to scan.

        Returns:
            Documents sorted by file name.

        Raises:
            DocumentError: If the directory cannot be listed.
        """
        dir_path = Path(directory) if isinstance(directory, str) else directory

        try:
            entries = sorted(dir_path.iterdir(), key=lambda p: p.name)
        except OSError as e:
            raise DocumentError(
                f"Failed to read directory: {dir_path}",
                code=ErrorCode.DOCUMENT_NOT_FOUND,
                details={"path": str(dir_path), "error": str(e)},
            ) from e

        documents: list[Document] = []
        for entry in entries:
            if not entry.is_file() or not self.supports(entry):
                continue
            try:
                documents.append(self.load(entry, index=len(documents)))
            except DocumentError as e:
                logger.warning(
                    f"Skipping unreadable file {entry.name}: {e.message}",
                    extra={"path": str(entry), "error_code": e.code.value},
                )

        logger.info(
            f"Loaded {len(documents)} documents",
            extra={"directory": str(dir_path)},
        )
        return documents
