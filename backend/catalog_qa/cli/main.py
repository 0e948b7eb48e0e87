"""CLI entrypoint for Catalog QA."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, List, NoReturn, Optional

import requests
import typer
import uvicorn

from catalog_qa.core.config import Settings
from catalog_qa.core.errors import CatalogQAError
from catalog_qa.core.logging import configure_logging
from catalog_qa.ingest.embeddings import load_embedding_model
from catalog_qa.ingest.indexer import ChunkIndexer
from catalog_qa.ingest.prune import prune_index
from catalog_qa.retrieval.index_file import read_index, write_index

app = typer.Typer(name="catalog-qa", help="Catalog QA command-line interface")

DEFAULT_HOST = "http://127.0.0.1:5173"


def _resolve_host(override: Optional[str]) -> str:
    if override:
        return override.rstrip("/")
    env_host = os.environ.get("CATQA_HOST")
    if env_host:
        return env_host.rstrip("/")
    return DEFAULT_HOST


def _request(method: str, path: str, host: Optional[str] = None, **kwargs) -> requests.Response:
    base = _resolve_host(host)
    url = f"{base}{path}"
    try:
        resp = requests.request(method, url, timeout=60, **kwargs)
    except requests.RequestException as exc:
        typer.echo(f"Request failed: {exc}", err=True)
        raise typer.Exit(code=1)
    if not resp.ok:
        try:
            detail = resp.json()
        except ValueError:
            detail = resp.text
        typer.echo(f"Request failed ({resp.status_code}): {detail}", err=True)
        raise typer.Exit(code=1)
    return resp


def _session_headers(session: Optional[str]) -> dict[str, str]:
    return {"X-Session-ID": session} if session else {}


def _load_settings(config: Optional[Path], **overrides: Any) -> Settings:
    base = Settings.from_yaml(config)
    data = base.model_dump()
    data.update({key: value for key, value in overrides.items() if value is not None})
    return Settings(**data)


def _fail(exc: Exception) -> NoReturn:
    typer.echo(f"Error: {exc}", err=True)
    raise typer.Exit(code=1)


@app.command()
def embed(
    paths: Optional[List[Path]] = typer.Argument(None, help="Files or folders to index (default: configured sources)"),
    out: Optional[Path] = typer.Option(None, "--out", help="Where to write the index file"),
    backend: Optional[str] = typer.Option(None, "--backend", help="Embedding backend: gemini or hashed"),
    chunk_size: Optional[int] = typer.Option(None, "--chunk-size", help="Window size in characters"),
    overlap: Optional[int] = typer.Option(None, "--overlap", help="Characters shared by adjacent windows"),
    config: Optional[Path] = typer.Option(None, "--config", help="YAML config file"),
) -> None:
    """Build the vector index from source documents."""
    configure_logging(use_json=False)
    try:
        settings = _load_settings(
            config,
            index_path=out,
            embedding_backend=backend,
            chunk_size=chunk_size,
            chunk_overlap=overlap,
        )
    except ValueError as exc:
        _fail(exc)
    sources = list(paths or settings.source_paths)
    if not sources:
        typer.echo("No source files given and none configured.", err=True)
        raise typer.Exit(code=1)
    indexer = ChunkIndexer(load_embedding_model(settings), batch_size=settings.embed_batch_size)
    try:
        index = indexer.build_from_paths(sources, settings.chunk_size, settings.chunk_overlap)
    except CatalogQAError as exc:
        _fail(exc)
    written = write_index(index, settings.index_path)
    summary = {
        "path": str(written),
        "vectors": index.size,
        "dim": index.dim,
        "model": index.metadata.embedding_model_id,
        "sources": index.metadata.sources,
    }
    typer.echo(json.dumps(summary, indent=2))


@app.command()
def prune(
    names: List[str] = typer.Argument(..., help="Source names to remove (case-insensitive)"),
    index_path: Optional[Path] = typer.Option(None, "--index", help="Index file to prune"),
    config: Optional[Path] = typer.Option(None, "--config", help="YAML config file"),
) -> None:
    """Remove every vector of the named sources from the index file."""
    configure_logging(use_json=False)
    path = index_path or Settings.from_yaml(config).index_path
    try:
        report = prune_index(path, names)
    except CatalogQAError as exc:
        _fail(exc)
    payload = {
        "removed": report.removed,
        "remaining": report.remaining,
        "backup": str(report.backup_path),
        "sources_present": list(report.sources_present),
    }
    typer.echo(json.dumps(payload, indent=2))


@app.command()
def inspect(
    index_path: Optional[Path] = typer.Option(None, "--index", help="Index file to summarize"),
    config: Optional[Path] = typer.Option(None, "--config", help="YAML config file"),
) -> None:
    """Summarize an index file."""
    path = index_path or Settings.from_yaml(config).index_path
    try:
        index = read_index(path)
    except CatalogQAError as exc:
        _fail(exc)
    per_source: dict[str, int] = {}
    for entry in index.entries:
        per_source[entry.source_name] = per_source.get(entry.source_name, 0) + 1
    payload = {
        "path": str(path),
        "createdAt": index.metadata.created_at,
        "model": index.metadata.embedding_model_id,
        "vectors": index.size,
        "dim": index.dim,
        "chunk_size": index.metadata.chunk_size,
        "chunk_overlap": index.metadata.chunk_overlap,
        "sources": per_source,
    }
    typer.echo(json.dumps(payload, indent=2))


@app.command()
def ask(
    question: str = typer.Argument(..., help="Question text"),
    session: Optional[str] = typer.Option(None, "--session", help="Session id to continue"),
    host: Optional[str] = typer.Option(None, "--host", help="Override backend host"),
) -> None:
    """Ask a running server a question."""
    resp = _request("POST", "/api/ask", host=host, json={"question": question}, headers=_session_headers(session))
    typer.echo(json.dumps(resp.json(), indent=2, ensure_ascii=False))


@app.command()
def session(
    session_id: str = typer.Argument(..., help="Session id"),
    history: int = typer.Option(0, "--history", help="Also print the last N turns"),
    host: Optional[str] = typer.Option(None, "--host", help="Override backend host"),
) -> None:
    """Show a session's counters and, optionally, recent history."""
    headers = _session_headers(session_id)
    payload: dict[str, Any] = _request("GET", "/api/session", host=host, headers=headers).json()
    if history > 0:
        items = _request("GET", "/api/history", host=host, headers=headers, params={"n": history}).json()
        payload["items"] = items["items"]
    typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))


@app.command()
def reset(
    session_id: str = typer.Argument(..., help="Session id"),
    hard: bool = typer.Option(False, "--hard", help="Forget the session instead of clearing it"),
    host: Optional[str] = typer.Option(None, "--host", help="Override backend host"),
) -> None:
    """Clear a session's history on a running server."""
    resp = _request("POST", "/api/reset", host=host, json={"hard": hard}, headers=_session_headers(session_id))
    typer.echo(json.dumps(resp.json(), indent=2))


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Interface to bind"),
    port: int = typer.Option(5173, "--port", help="Port to listen on", envvar="PORT"),
    reload: bool = typer.Option(False, "--reload", help="Restart on code changes"),
) -> None:
    """Run the HTTP API."""
    uvicorn.run("catalog_qa.app:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    app()
