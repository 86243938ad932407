import click
import functools
import logging
import tempfile
import traceback
from pathlib import Path

from . import constants
from .config import Config
from .builder import Builder, Pusher, Properties
from .builder.context import Context
from .io import builtin_templates, open_template
from .utils import setup_logger, parse_module_levels
from .exceptions import (
    DockerbuildError,
    ConfigurationError,
    DefinitionError,
    BuildError,
    DockerbuildIOError,
)
from . import __version__


def complete_config_files(ctx, param, incomplete):
    """Auto-complete .yml and .yaml config files in current directory"""
    try:
        cwd = Path.cwd()
        yml_files = list(cwd.glob('*.yml')) + list(cwd.glob('*.yaml'))
        return sorted(f.name for f in yml_files if f.name.startswith(incomplete))
    except OSError as e:
        logging.debug(f"Config file auto-completion failed: {e}")
        return []


def parse_arguments(values) -> dict:
    """`name=value` pairs given with -a/--arg."""
    arguments = {}
    for item in values:
        name, sep, value = item.partition('=')
        if not sep or not name:
            raise click.BadParameter(f"expected name=value, got '{item}'", param_hint="'-a' / '--arg'")
        arguments[name] = value
    return arguments


def setup_logging(debug: bool, log_levels: str = None, log_file: str = None):
    """Setup logger with debug and module-level configuration"""
    module_levels = parse_module_levels(log_levels) if log_levels else None
    setup_logger(debug=debug, module_levels=module_levels, log_file=log_file)


def handle_errors(func):
    """Decorator to handle common exceptions"""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except ConfigurationError as e:
            _report("Configuration error", e)
        except DefinitionError as e:
            _report("Definition error", e)
        except BuildError as e:
            _report("Build error", e)
        except DockerbuildIOError as e:
            _report("IO error", e)
        except DockerbuildError as e:
            _report("An unexpected application error occurred", e)
    return wrapper


def _report(kind: str, e: Exception):
    logging.error(f"{kind}: {e}")
    ctx = click.get_current_context()
    if ctx.obj.get('debug'):
        traceback.print_exc()
    raise click.Abort()


@handle_errors
def do_build(config_file: str, image: str, no_cache: bool, comment: str, arguments: dict):
    """Execute build command"""
    config = Config(config_file)
    builder = Builder(
        config,
        image=image,
        no_cache=True if no_cache else None,
        comment=comment,
        arguments=arguments,
    )
    result = builder.run()
    click.echo(f"{result.tag} {result.image_id}")


@handle_errors
def do_push(config_file: str):
    """Execute push command"""
    config = Config(config_file)
    Pusher(config).run()


@handle_errors
def do_image(config_file: str, image: str):
    """Execute image command"""
    config = Config(config_file)
    properties = Properties(config, image=image)
    click.echo(f"image: {properties.image()}")
    click.echo(f"origin: {properties.origin()}")
    click.echo(f"scm: {properties.scm()}")


@handle_errors
def do_args(config_file: str):
    """Execute args command"""
    config = Config(config_file)
    source = open_template(config.template, config.project.basedir)
    with tempfile.TemporaryDirectory(prefix="dockerbuild-args-") as scratch:
        formals = Context.create(source, Path(scratch) / constants.CONTEXT_SUBDIR).formals()
    for formal in formals.values():
        if formal.mandatory:
            click.echo(f"{formal.name} (mandatory)")
        else:
            click.echo(f"{formal.name}={formal.default}")


@click.group()
@click.option('--debug', is_flag=True, help='Enable debug logging')
@click.option('-l', '--log-levels', help="Comma-separated per-module log levels (e.g., 'bind=DEBUG,engine=INFO')")
@click.option('-f', '--log-file', help='Path to log file')
@click.version_option(version=__version__, prog_name='dockerbuild')
@click.pass_context
def cli(ctx, debug, log_levels, log_file):
    """dockerbuild - Package a Maven module into a Docker image

    \b
    Examples:
      dockerbuild build                       Build with dockerbuild.yml
      dockerbuild build -a greeting=%base64:hi
      dockerbuild push                        Push the image of the last build
      dockerbuild image                       Show the image reference
    """
    ctx.ensure_object(dict)
    ctx.obj['debug'] = debug
    setup_logging(debug, log_levels, log_file)


@cli.command()
@click.option('-c', '--config', 'config_file', default=constants.DEFAULT_CONFIG_FILENAME,
              show_default=True, shell_complete=complete_config_files, help='Configuration file')
@click.option('-i', '--image', help='Image reference template, e.g. %g/%a:%V')
@click.option('--no-cache', is_flag=True, help='Do not use the build cache')
@click.option('--comment', help='Free text recorded as buildComment and label')
@click.option('-a', '--arg', 'args', multiple=True, help='Build argument override name=value (repeatable)')
@click.pass_context
def build(ctx, config_file, image, no_cache, comment, args):
    """Build the image"""
    do_build(config_file, image, no_cache, comment, parse_arguments(args))


@cli.command()
@click.option('-c', '--config', 'config_file', default=constants.DEFAULT_CONFIG_FILENAME,
              show_default=True, shell_complete=complete_config_files, help='Configuration file')
@click.pass_context
def push(ctx, config_file):
    """Push the image recorded by the last build"""
    do_push(config_file)


@cli.command()
@click.option('-c', '--config', 'config_file', default=constants.DEFAULT_CONFIG_FILENAME,
              show_default=True, shell_complete=complete_config_files, help='Configuration file')
@click.option('-i', '--image', help='Image reference template, e.g. %g/%a:%V')
@click.pass_context
def image(ctx, config_file, image):
    """Show the image reference, build origin and SCM origin a build would record"""
    do_image(config_file, image)


@cli.command()
@click.option('-c', '--config', 'config_file', default=constants.DEFAULT_CONFIG_FILENAME,
              show_default=True, shell_complete=complete_config_files, help='Configuration file')
@click.pass_context
def args(ctx, config_file):
    """List the build arguments declared by the template's Dockerfile"""
    do_args(config_file)


@cli.command()
def templates():
    """List the built-in templates"""
    for name in builtin_templates():
        click.echo(name)
