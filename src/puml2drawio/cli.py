import click
import json
import logging
from functools import wraps
from importlib.metadata import PackageNotFoundError, version as package_version
from puml2drawio.c4 import detect_c4
from puml2drawio.classify import classify as classify_source
from puml2drawio.client import ImageServiceClient, ImageServiceError
from puml2drawio.config import Configuration
from puml2drawio.convert import EmptySourceError, convert_plantuml_to_drawio
from puml2drawio.imgurl import build_mermaid_img_url, encode_plantuml
from puml2drawio.utils import load_config, normalize_lines, LogFormatter

log = logging.getLogger(__name__)


def setup_command(func):
    """Decorator to handle common CLI setup (logging, config loading, version)."""

    @wraps(func)
    def wrapper(config, debug, version=None, **kwargs):
        # Handle --version flag
        if version:
            try:
                click.echo(package_version("puml2drawio"))
            except PackageNotFoundError:
                click.echo("unknown")
            return

        # Setup logging
        log_handler = logging.StreamHandler()
        log_handler.setFormatter(LogFormatter())
        logging.basicConfig(level=logging.DEBUG if debug else logging.WARNING, handlers=[log_handler])

        # Load config, defaults if no file given
        try:
            config_obj = load_config(config) if config else Configuration()
        except (OSError, ValueError) as error:
            raise click.ClickException(f"Cannot load configuration {config}: {error}")
        if debug:
            log.debug(json.dumps(config_obj.model_dump(), indent=4))

        return func(config_obj=config_obj, debug=debug, **kwargs)

    return wrapper


@click.group()
def cli():
    pass


@click.command()
@click.argument("source", type=click.File("r", encoding="utf-8"), default="-")
@click.option("--config", default=None, help="Configuration file.")
@click.option("--debug", default=False, is_flag=True, help="Enable debug.")
@click.option("--version", is_flag=True, help="Show the application's version.")
@click.option("--output", default=None, help="Output file path (default: stdout).")
@click.option("--compressed/--no-compressed", default=None, help="Embed diagram compressed (default: from config).")
@setup_command
def convert(config_obj, debug, source, output, compressed):
    """Convert PlantUML diagram to draw.io document."""
    if compressed is None:
        compressed = config_obj.compressed
    try:
        document = convert_plantuml_to_drawio(source.read(), compressed=compressed, config=config_obj)
    except EmptySourceError as error:
        raise click.ClickException(str(error))

    if output:
        with open(output, "w", encoding="utf-8") as f:
            f.write(document)
        click.echo(f"Diagram written to {output}")
    else:
        click.echo(document)


@click.command()
@click.argument("source", type=click.File("r", encoding="utf-8"), default="-")
@click.option("--config", default=None, help="Configuration file.")
@click.option("--debug", default=False, is_flag=True, help="Enable debug.")
@setup_command
def classify(config_obj, debug, source):
    """Print detected diagram type."""
    text = source.read().strip()
    if detect_c4(text):
        click.echo("c4")
    else:
        click.echo(classify_source(text, normalize_lines(text)).value)


@click.command()
@click.argument("source", type=click.File("r", encoding="utf-8"), default="-")
@click.option("--config", default=None, help="Configuration file.")
@click.option("--debug", default=False, is_flag=True, help="Enable debug.")
@click.option("--mermaid", is_flag=True, help="Source is Mermaid, not PlantUML.")
@click.option("--theme", default=None, help="PlantUML theme (default: from config).")
@click.option("--format", default=None, help="Image format (default: from config).")
@click.option("--download", default=None, help="Download rendered image to this path.")
@setup_command
def imgurl(config_obj, debug, source, mermaid, theme, format, download):
    """Print image URL of diagram rendered by PlantUML or Mermaid service."""
    text = source.read()
    try:
        if mermaid:
            url = build_mermaid_img_url(
                text,
                format=format or config_obj.mermaid_format,
                server=config_obj.mermaid_server,
                base_url=config_obj.mermaid_base_url,
            )
        else:
            url = encode_plantuml(
                text,
                theme=theme or config_obj.plantuml_theme,
                format=format or config_obj.plantuml_format,
                server=config_obj.plantuml_server,
            )
    except ValueError as error:
        raise click.ClickException(str(error))
    click.echo(url)

    if download:
        client = ImageServiceClient(config_obj.request_timeout)
        try:
            data = client.download(url)
        except ImageServiceError as error:
            raise click.ClickException(str(error))
        with open(download, "wb") as f:
            f.write(data)
        click.echo(f"Image written to {download}")


cli.add_command(convert)
cli.add_command(classify)
cli.add_command(imgurl)

if __name__ == "__main__":
    cli()
