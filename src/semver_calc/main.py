"""CLI interface for semver-calc."""

import sys

import click

from semver_calc import __version__
from semver_calc.config import ConfigError, load_config
from semver_calc.git import GitError, GitRepository
from semver_calc.history import calculate_from_tag, calculate_next_version
from semver_calc.logger import setup_logging
from semver_calc.version import AnalysisResult, VersionError


def add_help_option(f):
    """Custom decorator to add '-h' as an alias for '--help'."""
    f = click.help_option("--help", "-h")(f)
    return f


def echo_summary(result: AnalysisResult) -> None:
    """Print how the next version was derived."""
    click.echo(f"Previous version: {result.previous_version}")
    click.echo(f"Analysed {result.commits_analysed} commits")
    click.echo(
        f"Release types found: major={result.major} "
        f"minor={result.minor} patch={result.patch}"
    )
    if result.release_type:
        click.echo(f"Determined release type: {result.release_type}")
    else:
        click.echo("No conventional commits found, version is reset")
    click.echo(f"Prerelease: {result.prerelease}")
    click.echo(f"Version bump: {result.previous_version} → {result.version}")
    click.echo()


@click.group()
@add_help_option
@click.version_option(__version__, "--version", "-v")
def cli():
    """semver-calc - Calculate the next semantic version from git history."""
    pass


@cli.command()
@add_help_option
@click.argument(
    "path",
    default=".",
    type=click.Path(exists=True, file_okay=False),
)
@click.option(
    "--commit",
    "-c",
    default=None,
    help="Commit to start the history walk from (default: HEAD)",
)
@click.option(
    "--tag",
    "-t",
    default=None,
    help="Tag to start the history walk from; its name is the previous version",
)
@click.option(
    "--start-version",
    "-s",
    default=None,
    help="Previous version to bump, e.g. v1.0.2, v1.0.2-pre.4 or v1.0.2-alpha.2",
)
@click.option(
    "--config",
    default=None,
    help="Path to configuration file (default: semver-calc.yaml in git root)",
)
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Show how the version was derived; repeat for debug logging",
)
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    help="Only log errors",
)
def next_version(
    path: str,
    commit: str | None,
    tag: str | None,
    start_version: str | None,
    config: str | None,
    verbose: int,
    quiet: bool,
):
    """Calculate the next semantic version based on commit history.

    Walks the history from HEAD (or the given commit or tag), classifies
    each conventional commit and bumps the previous version. Builds from
    branches other than main/master get a prerelease label.
    """
    setup_logging(-1 if quiet else verbose)

    if commit is not None and tag is not None:
        click.echo("Error: --commit and --tag cannot be used together", err=True)
        sys.exit(1)

    try:
        repository = GitRepository(path)
        calc_config = load_config(config, git_root=repository.root)

        if tag is not None:
            result = calculate_from_tag(repository, tag, previous_version=start_version)
        else:
            since = None if commit is None else repository.resolve_commit(commit)
            result = calculate_next_version(
                repository,
                since=since,
                previous_version=(
                    calc_config.get_start_version()
                    if start_version is None
                    else start_version
                ),
            )

        if verbose:
            echo_summary(result)

        click.echo(f"{calc_config.get_version_prefix()}{result}")

    except ConfigError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)
    except VersionError as e:
        click.echo(f"Version error: {e}", err=True)
        sys.exit(1)
    except GitError as e:
        click.echo(f"Git error: {e}", err=True)
        sys.exit(1)


@cli.command()
@add_help_option
def generate_config():
    """Generate a configuration file template.

    Outputs a documented configuration template to stdout.

    Usage:
        semver-calc generate-config > semver-calc.yaml
    """
    from semver_calc.config import generate_config_template

    click.echo(generate_config_template(), nl=False)


@cli.command()
@add_help_option
@click.argument(
    "shell",
    type=click.Choice(["bash", "zsh", "fish"], case_sensitive=False),
)
def completion(shell: str):
    """Generate shell completion script.

    Usage:
        # Bash - save to file and source in ~/.bashrc
        semver-calc completion bash > ~/.semver-calc-completion.bash
        echo ". ~/.semver-calc-completion.bash" >> ~/.bashrc

        # Fish - save to completions directory
        semver-calc completion fish > ~/.config/fish/completions/semver-calc.fish
    """
    from click.shell_completion import get_completion_class

    completion_class = get_completion_class(shell.lower())

    complete = completion_class(
        cli=cli,
        ctx_args={},
        prog_name="semver-calc",
        complete_var="_SEMVER_CALC_COMPLETE",
    )
    click.echo(complete.source())


if __name__ == "__main__":
    cli()
