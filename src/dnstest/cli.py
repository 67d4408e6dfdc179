import click
import logging
import traceback
import yaml
from pathlib import Path
from typing import Dict, Optional

from pydantic import ValidationError

from .artifacts import ServerArtifacts, plan
from .config import HarnessConfig
from .implementation import IMPLEMENTATIONS, Implementation, NameServerConfig, ResolverConfig, Role
from .utils import setup_logger, parse_module_levels
from .exceptions import (
    DNSTestError,
    ConfigurationError,
    ConfigValidationError,
    DefinitionError,
    ArtifactError,
)
from . import constants, __version__


def setup_logging(debug: bool, log_levels: str = None, log_file: str = None):
    """Setup logger with debug and module-level configuration"""
    module_levels = parse_module_levels(log_levels) if log_levels else None
    setup_logger(debug=debug, module_levels=module_levels, log_file=log_file)


def _abort(kind: str, e: Exception):
    logging.error(f"{kind}: {e}")
    ctx = click.get_current_context()
    if ctx.obj and ctx.obj.get('debug'):
        traceback.print_exc()
    raise click.Abort()


def handle_errors(func):
    """Decorator to handle common exceptions"""
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except ConfigurationError as e:
            _abort("Configuration error", e)
        except DefinitionError as e:
            _abort("Definition error", e)
        except ArtifactError as e:
            _abort("Artifact error", e)
        except DNSTestError as e:
            _abort("An unexpected application error occurred", e)
        except FileNotFoundError as e:
            _abort("A required file was not found", e)
        except OSError as e:
            _abort("Failed to write output", e)
    return wrapper


def _dump(artifacts: Dict[str, ServerArtifacts], exclude: Optional[set] = None) -> str:
    data = {name: art.model_dump(mode="json", exclude=exclude) for name, art in artifacts.items()}
    return yaml.safe_dump(data, sort_keys=False, default_flow_style=False)


@handle_errors
def do_show(impl_name: str, role_name: str, repository: Optional[str], origin: Optional[str],
            dnssec: bool, netmask: str):
    """Execute show command"""
    implementation = Implementation.from_name(impl_name, repository)
    role = Role.parse(role_name)
    try:
        if role.is_resolver():
            config = ResolverConfig(use_dnssec=dnssec, netmask=netmask)
        else:
            if origin is None:
                raise click.UsageError("--origin is required for the name-server role")
            config = NameServerConfig(origin=origin)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid server parameters:\n{e}")

    logging.debug(f"Showing artifacts of {implementation} as {role}")
    click.echo(_dump({str(implementation): plan(implementation, config)}), nl=False)


@handle_errors
def do_render(config_file: str, output: Optional[str]):
    """Execute render command"""
    harness = HarnessConfig(config_file)
    artifacts = harness.plan()

    if not output:
        click.echo(_dump(artifacts), nl=False)
        return

    out_dir = Path(output)
    for name, art in artifacts.items():
        target = out_dir / name / art.conf_file_path.lstrip("/")
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(art.config_text, encoding='utf-8')
        logging.info(f"[{name}] {art.implementation} config written to {target}")

    plan_file = out_dir / constants.PLAN_FILENAME
    plan_file.write_text(_dump(artifacts, exclude={"config_text"}), encoding='utf-8')
    logging.info(f"Plan for '{harness.name}' written to {plan_file}")


def do_matrix():
    """Execute matrix command"""
    roles = list(Role)
    width = max(len(name) for name in IMPLEMENTATIONS) + 2
    click.echo("".ljust(width) + "".join(str(role).ljust(14) for role in roles).rstrip())
    for name, impl_class in IMPLEMENTATIONS.items():
        cells = ["yes" if role in impl_class.supported_roles else "-" for role in roles]
        click.echo(name.ljust(width) + "".join(cell.ljust(14) for cell in cells).rstrip())


@click.group()
@click.option('--debug', is_flag=True, help='Enable debug logging')
@click.option('-l', '--log-levels', help="Comma-separated per-module log levels (e.g., 'impl=DEBUG,tpl=INFO')")
@click.option('-f', '--log-file', help='Path to log file')
@click.version_option(version=__version__, prog_name='dnstest')
@click.pass_context
def cli(ctx, debug, log_levels, log_file):
    """DNS Test - Server artifacts for DNS interoperability tests

    \b
    Examples:
      dnstest show unbound resolver --dnssec     Resolver config for unbound
      dnstest show bind name-server --origin example.com.
      dnstest render harness.yml -o out          Write every server's config
    """
    ctx.ensure_object(dict)
    ctx.obj['debug'] = debug
    setup_logging(debug, log_levels, log_file)


@cli.command()
@click.argument('implementation', type=click.Choice(sorted(IMPLEMENTATIONS), case_sensitive=False))
@click.argument('role', type=click.Choice([role.value for role in Role], case_sensitive=False))
@click.option('-r', '--repository', help='Source checkout or URL (hickory only)')
@click.option('--origin', help='Zone served by a name server, fully qualified')
@click.option('--dnssec/--no-dnssec', default=False, help='Enable DNSSEC validation (resolver only)')
@click.option('--netmask', default='0.0.0.0/0', show_default=True, help='Clients allowed to query (resolver only)')
def show(implementation, role, repository, origin, dnssec, netmask):
    """Print the artifacts of one implementation in one role"""
    do_show(implementation, role, repository, origin, dnssec, netmask)


@cli.command()
@click.argument('config_file', type=click.Path(dir_okay=False))
@click.option('-o', '--output', help='Write config files and plan.yml below this directory')
def render(config_file, output):
    """Plan every server of a harness file"""
    do_render(config_file, output)


@cli.command()
def matrix():
    """Print which implementation can act in which role"""
    do_matrix()


def main():
    cli()
