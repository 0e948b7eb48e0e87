"""Document loaders for supported source formats."""

from __future__ import annotations

from pathlib import Path

import fitz
import yaml
from markdown_it import MarkdownIt

from catalog_qa.models.entities import SourceDocument

_MD = MarkdownIt()


class BaseLoader:
    """Common loader interface."""

    suffixes: tuple[str, ...] = ()

    def can_load(self, path: Path) -> bool:
        return path.suffix.lower() in self.suffixes

    def load(self, path: Path) -> SourceDocument:  # pragma: no cover - interface
        raise NotImplementedError


class TextLoader(BaseLoader):
    suffixes = (".txt", ".text")

    def load(self, path: Path) -> SourceDocument:
        text = path.read_bytes().decode("utf-8", errors="ignore")
        return SourceDocument(name=path.name, raw_text=text)


class MarkdownLoader(BaseLoader):
    suffixes = (".md", ".markdown")

    def load(self, path: Path) -> SourceDocument:
        text = path.read_bytes().decode("utf-8", errors="ignore")
        _, body = _split_front_matter(text)
        return SourceDocument(name=path.name, raw_text=_markdown_to_text(body))


class PDFLoader(BaseLoader):
    suffixes = (".pdf",)

    def load(self, path: Path) -> SourceDocument:
        raw = path.read_bytes()
        with fitz.open(stream=raw, filetype="pdf") as doc:
            pages = [page.get_text("text", sort=True) for page in doc]
        text = "\n\n".join(pages).replace("\r", "")
        return SourceDocument(name=path.name, raw_text=text)


class LoaderRegistry:
    """Registry that selects an appropriate loader for a path."""

    def __init__(self) -> None:
        self._loaders: list[BaseLoader] = [
            PDFLoader(),
            TextLoader(),
            MarkdownLoader(),
        ]

    def register(self, loader: BaseLoader) -> None:
        self._loaders.append(loader)

    def for_path(self, path: Path) -> BaseLoader | None:
        for loader in self._loaders:
            if loader.can_load(path):
                return loader
        return None

    def load(self, path: Path) -> SourceDocument:
        loader = self.for_path(path)
        if loader is None:
            raise ValueError(f"No loader registered for suffix {path.suffix}")
        return loader.load(path)


def _split_front_matter(text: str) -> tuple[dict[str, object] | None, str]:
    if text.startswith("---"):
        parts = text.split("---", 2)
        if len(parts) >= 3:
            try:
                front_matter = yaml.safe_load(parts[1]) or {}
            except yaml.YAMLError:
                return None, text
            if isinstance(front_matter, dict):
                return front_matter, parts[2]
    return None, text


def _markdown_to_text(text: str) -> str:
    parts = [token.content.strip() for token in _MD.parse(text) if token.content.strip()]
    return "\n".join(parts) if parts else text


__all__ = ["BaseLoader", "LoaderRegistry", "MarkdownLoader", "PDFLoader", "TextLoader"]
