# Copyright 2024 Michael Maillet, Damien Davison, Sacha Davison
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Command Line Interface for Selenoid Standalone.
"""
import sys

import click

from ..exceptions import OptionsError, SevereServiceError
from ..MANAGERS.lifecycle_controller import LifecycleController
from ..PARSERS.options_parser import OptionsParser
from ..UTILS.logging_setup import configure_logging


@click.group()
@click.option('--config', '-c', 'config_file', default=None, help='Service options YAML file')
@click.option('--browsers', '-b', default=None, help='Path to browsers.json')
@click.option('--verbose', '-v', is_flag=True, help='Show debug output')
@click.option('--log-file', default=None, help='Also write events as JSON lines to this file')
@click.pass_context
def cli(ctx, config_file, browsers, verbose, log_file):
    """
    Selenoid Standalone - run a Selenoid gateway and UI as throwaway containers.
    """
    configure_logging(verbose=verbose, log_file=log_file)
    ctx.ensure_object(dict)
    ctx.obj['config_file'] = config_file
    ctx.obj['browsers'] = browsers


def _controller(ctx, **overrides) -> LifecycleController:
    """
    Builds the controller from the group options plus command overrides.
    """
    try:
        config = OptionsParser().parse(
            ctx.obj.get('config_file'),
            browsers_config_path=ctx.obj.get('browsers'),
            **overrides
        )
    except OptionsError as e:
        raise click.ClickException(str(e))
    return LifecycleController(config)


@cli.command()
@click.option('--skip-pull', is_flag=True, help='Do not pull missing images')
@click.option('--no-ui', is_flag=True, help='Start the gateway only')
@click.pass_context
def up(ctx, skip_pull, no_ui):
    """Start the gateway and UI containers."""
    controller = _controller(
        ctx,
        skip_image_pull=True if skip_pull else None,
        enable_ui=False if no_ui else None,
    )
    try:
        controller.prepare()
    except SevereServiceError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    click.echo("Selenoid started.")


@cli.command()
@click.pass_context
def down(ctx):
    """Stop and remove the containers."""
    _controller(ctx).complete()
    click.echo("Selenoid stopped.")


@cli.command()
@click.pass_context
def ps(ctx):
    """List container status"""
    controller = _controller(ctx)
    names = {
        'gateway': controller.config.gateway_container_name,
        'ui': controller.config.ui_container_name,
    }
    click.echo(f"{'ROLE':10} {'CONTAINER':20} {'STATUS':10}")
    click.echo("-" * 42)
    for role, running in controller.status().items():
        state = "running" if running else "stopped"
        click.echo(f"{role:10} {names[role]:20} {state:10}")


@cli.command()
@click.pass_context
def pull(ctx):
    """Pull browser, UI and gateway images that are missing locally."""
    _controller(ctx).pull_images()
    click.echo("Images resolved.")


def main():
    """
    Main entry point for the CLI.
    """
    cli(obj={})


if __name__ == '__main__':
    main()
