"""EasyCert CLI interface.

Commands:
- infer: Infer risk scenarios from a security facts file
- templates: List the security-template catalog
- report: Render the ISO 27001 risk-assessment document
- check: Show whether inference will use AI or the fallback
- init: Initialize EasyCert configuration

Global options:
- --config: Path to configuration file
- --verbose: Enable verbose output with timestamps
- --quiet: Suppress info messages
- --ci: JSON log lines
- --version: Show version and exit
"""

import json
from pathlib import Path
from typing import Annotated, Any

import typer
import yaml

from easycert import __version__
from easycert.catalog import TemplateCatalog, TemplateNotFoundError, load_templates_file
from easycert.config import EasyCertConfig, create_default_config, load_config
from easycert.models import SecurityFacts
from easycert.utils.logging import configure_from_cli, get_logger

app = typer.Typer(
    name="easycert",
    help="ISO 27001 risk assessment assistant",
    add_completion=False,
    no_args_is_help=True,
)

# Global state
_config: EasyCertConfig | None = None
_logger = get_logger()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"easycert {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to configuration file",
            exists=True,
            dir_okay=False,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output with timestamps",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress info messages (warnings and errors only)",
        ),
    ] = False,
    ci: Annotated[
        bool,
        typer.Option(
            "--ci",
            help="Enable CI mode with JSON log output",
        ),
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = False,
) -> None:
    """EasyCert - ISO 27001 risk assessment assistant.

    Infers risk scenarios from an organization's security facts and renders
    the risk-assessment document.
    """
    global _config

    configure_from_cli(verbose=verbose, quiet=quiet, ci=ci)

    # init must be able to replace a broken config file
    if ctx.invoked_subcommand == "init":
        return

    try:
        _config = load_config(config_path=config)
        if _config.config_path:
            _logger.debug(f"Loaded config from: {_config.config_path}")
    except FileNotFoundError as e:
        _logger.error(str(e))
        raise typer.Exit(1)
    except (ValueError, yaml.YAMLError) as e:
        _logger.error(f"Failed to load config: {e}")
        raise typer.Exit(1)

    for warning in _current_config().llm.validate():
        _logger.debug(f"LLM config: {warning}")


# =============================================================================
# Helpers
# =============================================================================


def _current_config() -> EasyCertConfig:
    return _config if _config is not None else EasyCertConfig()


def _load_facts_file(path: Path) -> SecurityFacts:
    """Read a YAML or JSON facts file.

    The facts may sit at the top level or under a ``securityInfo`` key.
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        _logger.error(f"Invalid facts file {path}: {e}")
        raise typer.Exit(1)

    if not isinstance(data, dict):
        _logger.error(f"Facts file must contain a mapping: {path}")
        raise typer.Exit(1)

    return SecurityFacts.from_dict(data.get("securityInfo", data))


def _load_catalog() -> TemplateCatalog:
    catalog = TemplateCatalog.with_defaults()
    templates_file = _current_config().templates_file
    if templates_file:
        try:
            for template in load_templates_file(Path(templates_file)):
                catalog.register(template, replace=True)
        except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
            _logger.error(f"Failed to load templates: {e}")
            raise typer.Exit(1)
    return catalog


# =============================================================================
# infer command
# =============================================================================


@app.command()
def infer(
    facts_file: Annotated[
        Path,
        typer.Argument(
            help="Security facts file (YAML or JSON)",
            exists=True,
            dir_okay=False,
        ),
    ],
    template: Annotated[
        str | None,
        typer.Option(
            "--template",
            "-t",
            help="Security template merged into the facts",
        ),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Write scenarios as JSON to this file",
        ),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Print scenarios as JSON",
        ),
    ] = False,
) -> None:
    """Infer risk scenarios from security facts.

    Uses the configured LLM when a credential is available and the
    rule-based fallback otherwise.
    """
    from easycert.risk import RiskInferenceService

    facts = _load_facts_file(facts_file)

    if template:
        catalog = _load_catalog()
        try:
            facts = facts.merged_with(catalog.get(template).facts)
        except TemplateNotFoundError as e:
            _logger.error(str(e))
            raise typer.Exit(1)

    service = RiskInferenceService(_current_config().llm)
    outcome = service.run(facts)
    payload = [scenario.to_dict() for scenario in outcome.scenarios]

    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
        _logger.info(f"Wrote {len(payload)} scenario(s) to {output}")

    if json_output:
        typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))
        return

    if not outcome.scenarios:
        typer.echo("No risk scenarios: assets, threats and vulnerabilities are all required.")
        return

    typer.echo(f"\nRisk scenarios ({outcome.mode.value})\n")
    for scenario in outcome.scenarios:
        typer.echo(
            f"  {scenario.id}  [{scenario.risk_level.value:<5}] "
            f"{scenario.asset} / {scenario.threat} / {scenario.vulnerability}"
        )
        typer.echo(
            f"       P={scenario.probability.value} I={scenario.impact.value}  "
            f"Controles: {', '.join(scenario.controls)}"
        )
    typer.echo()


# =============================================================================
# templates command
# =============================================================================


@app.command()
def templates(
    industry: Annotated[
        str | None,
        typer.Option(
            "--industry",
            "-i",
            help="Only templates for this industry",
        ),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output templates as JSON",
        ),
    ] = False,
) -> None:
    """List available security templates."""
    catalog = _load_catalog()
    items = catalog.by_industry(industry) if industry else catalog.list_templates()

    if json_output:
        typer.echo(json.dumps([t.to_dict() for t in items], indent=2, ensure_ascii=False))
        return

    if not items:
        typer.echo("No security templates found.")
        return

    for item in items:
        typer.echo(f"  {item.id:<22} {item.name} ({item.industry})")


# =============================================================================
# report command
# =============================================================================


@app.command()
def report(
    facts_file: Annotated[
        Path,
        typer.Argument(
            help="Security facts file (YAML or JSON)",
            exists=True,
            dir_okay=False,
        ),
    ],
    name: Annotated[
        str,
        typer.Option(
            "--name",
            "-n",
            help="Organization name",
        ),
    ],
    template: Annotated[
        str | None,
        typer.Option(
            "--template",
            "-t",
            help="Security template merged into the facts",
        ),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Output file path (overrides config)",
        ),
    ] = None,
) -> None:
    """Render the risk-assessment document for an organization."""
    from easycert.organizations import OrganizationService
    from easycert.risk import RiskInferenceService
    from easycert.templates import ReportRenderer

    config = _current_config()
    output_path = output or Path(config.output.path)

    facts = _load_facts_file(facts_file)
    catalog = _load_catalog()
    if template and template not in catalog:
        _logger.error(f"Security template not found: {template}")
        raise typer.Exit(1)

    service = OrganizationService(RiskInferenceService(config.llm), catalog=catalog)
    try:
        organization = service.create(name, security_facts=facts, template_id=template)
    except ValueError as e:
        _logger.error(f"Invalid organization: {e}")
        raise typer.Exit(1)
    organization = service.ensure_risk_scenarios(organization.id)

    renderer = ReportRenderer()
    try:
        rendered_path = renderer.render_to_file(organization, output_path)
    except (ValueError, OSError) as e:
        _logger.error(f"Rendering failed: {e}")
        raise typer.Exit(1)

    typer.echo(f"\n📄 Risk assessment written to: {rendered_path}")


# =============================================================================
# check command
# =============================================================================


@app.command()
def check(
    ping: Annotated[
        bool,
        typer.Option(
            "--ping",
            help="Make one minimal LLM call to verify connectivity",
        ),
    ] = False,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output results as JSON",
        ),
    ] = False,
) -> None:
    """Show which inference mode will be used.

    Exit codes:
        0: Ready (AI mode, or fallback by configuration)
        1: --ping requested and the LLM is unreachable
    """
    from easycert.llm import LLMClient

    llm = _current_config().llm
    mode = "ai" if llm.ai_enabled else "fallback"
    result: dict[str, Any] = {
        "mode": mode,
        "llm": llm.to_dict(redact=True),
        "warnings": llm.validate(),
    }

    reachable: bool | None = None
    if ping and llm.ai_enabled:
        reachable = LLMClient(llm).check_available()
        result["reachable"] = reachable

    if json_output:
        typer.echo(json.dumps(result, indent=2))
    else:
        typer.echo(f"\nInference mode: {mode}")
        typer.echo(f"  Provider: {llm.provider}  Model: {llm.model}")
        for warning in result["warnings"]:
            typer.echo(f"  ⚠️  {warning}")
        if reachable is not None:
            typer.echo(f"  LLM reachable: {'yes' if reachable else 'no'}")
        typer.echo()

    if reachable is False:
        raise typer.Exit(1)


# =============================================================================
# init command
# =============================================================================


@app.command()
def init(
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            help="Overwrite existing config",
        ),
    ] = False,
) -> None:
    """Initialize EasyCert configuration.

    Creates .easycert/config.yaml with commented defaults.
    """
    config_dir = Path(".easycert")
    config_dir.mkdir(exist_ok=True)

    config_file = config_dir / "config.yaml"
    if config_file.exists() and not force:
        _logger.error(f"Config already exists: {config_file}")
        _logger.info("Use --force to overwrite")
        raise typer.Exit(1)

    config_file.write_text(create_default_config(), encoding="utf-8")
    typer.echo(f"✅ Created {config_file}")


if __name__ == "__main__":
    app()
