"""CLI implementation for oneio."""

import io
import logging
from pathlib import Path
from typing import Optional

import typer

from . import (
    OneIoError, download_with_retry, get_cache_reader, get_reader, get_sha256_digest,
    s3_env_check, s3_list, s3_upload,
)
from .core.location import file_name
from .core.log import setup_basic_logging
from .utils import strip_line_ending

app = typer.Typer(add_completion=False, help="Read local or remote files with any compression.")
s3_app = typer.Typer(add_completion=False, help="Object storage commands.")
app.add_typer(s3_app, name="s3")


def _fail(message: str) -> None:
    typer.echo(message, err=True)
    raise typer.Exit(code=1)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Log debug output to stderr"),
):
    """oneio reads files from local or remote locations with any compression."""
    if verbose:
        setup_basic_logging(logging.DEBUG)


@app.command()
def read(
    file: str = typer.Argument(..., help="File to open, remote or local"),
    cache_dir: Optional[Path] = typer.Option(None, "--cache-dir", help="Cache reading to this directory"),
    cache_file: Optional[str] = typer.Option(None, "--cache-file", help="Cache file name"),
    cache_force: bool = typer.Option(False, "--cache-force", help="Refresh the cache even if present"),
    stats: bool = typer.Option(False, "-s", "--stats", help="Only print line and character counts"),
):
    """Print the decoded content of FILE line by line."""
    try:
        if cache_dir is not None:
            reader = get_cache_reader(file, cache_dir, cache_file, cache_force)
        else:
            reader = get_reader(file)
    except OneIoError as e:
        _fail(f"Cannot open {file}: {e}")

    count_lines = 0
    count_chars = 0
    try:
        with io.TextIOWrapper(reader, encoding="utf-8", newline="\n") as text:
            for line in text:
                line = strip_line_ending(line)
                if not stats:
                    typer.echo(line)
                count_chars += len(line)
                count_lines += 1
    except (OneIoError, OSError, UnicodeDecodeError) as e:
        _fail(f"Cannot read line from {file}: {e}")

    if stats:
        typer.echo(f"lines: \t {count_lines}")
        typer.echo(f"chars: \t {count_chars}")


@app.command()
def download(
    file: str = typer.Argument(..., help="File to download, remote or local"),
    outfile: Optional[Path] = typer.Option(None, "-o", "--outfile", help="Output file path"),
    retry: int = typer.Option(0, "--retry", min=0, help="Retry the whole transfer N times"),
):
    """Download FILE verbatim (like wget), to the current directory by default."""
    out_path = outfile or Path(file_name(file) or "output.txt")
    try:
        download_with_retry(file, out_path, retry)
    except OneIoError as e:
        _fail(f"file download error: {e}")
    typer.echo(f"file successfully downloaded to {out_path}")


@app.command()
def digest(
    file: str = typer.Argument(..., help="File to hash, remote or local"),
):
    """Print the SHA256 digest of FILE's raw bytes."""
    try:
        typer.echo(get_sha256_digest(file))
    except OneIoError as e:
        _fail(f"digest error: {e}")


@s3_app.command("upload")
def s3_upload_command(
    file: Path = typer.Argument(..., help="Local file to upload"),
    bucket: str = typer.Argument(..., help="Bucket name"),
    path: str = typer.Argument(..., help="Object key"),
):
    """Upload FILE to s3://BUCKET/PATH."""
    try:
        s3_env_check()
    except OneIoError as e:
        _fail(f"missing s3 credentials\n{e}")
    try:
        s3_upload(bucket, path, file)
    except OneIoError as e:
        _fail(f"file upload error: {e}")
    typer.echo(f"file successfully uploaded to s3://{bucket}/{path}")


@s3_app.command("list")
def s3_list_command(
    bucket: str = typer.Argument(..., help="Bucket name"),
    prefix: str = typer.Argument("", help="Key prefix"),
    delimiter: Optional[str] = typer.Option(None, "-d", "--delimiter", help="Delimiter for directory listing"),
    dirs: bool = typer.Option(False, "--dirs", help="Show directories only"),
):
    """List objects of BUCKET under PREFIX."""
    try:
        s3_env_check()
    except OneIoError as e:
        _fail(f"missing s3 credentials\n{e}")
    try:
        paths = s3_list(bucket, prefix, delimiter, dirs)
    except OneIoError as e:
        _fail(f"unable to list bucket content\n{e}")
    for p in paths:
        typer.echo(p)


if __name__ == "__main__":
    app()
