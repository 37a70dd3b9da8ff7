"""
Layout Decision CLI

Decides one-page layouts for extracted resume blocks and validates stored
decisions.

Commands:
    decide    - Decide a layout for an extraction result (or bare block list)
    validate  - Check a stored decision against its block set
    templates - List the template constraint table

Examples:\n

    resumefit decide outs/blocks/res_42.json                 # Template from suggestedTemplate

    resumefit decide outs/blocks/res_42.json -t B -o l.json  # Two-column, write decision

    resumefit decide outs/blocks/res_42.json --report l.md   # Markdown report

    resumefit validate outs/blocks/res_42.json l.json        # Validate a stored decision

    resumefit templates                                      # List templates
"""

import json
import os
import time
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from typing_extensions import Annotated

from resumefit.contexts.blocks import BlockIntegrityError, load_extraction_result
from resumefit.contexts.layout import (
    DecisionCache,
    InvalidConstraintsError,
    LayoutDecision,
    TemplateRegistry,
    UnknownTemplateError,
    decide_layout,
    validate_layout,
)
from resumefit.contexts.layout.logger import (
    log_decision_result,
    log_decision_start,
    log_validation_result,
    setup_layout_logger,
)
from resumefit.contexts.rendering import (
    build_render_plan,
    format_placement_table,
    render_layout_report,
)
from resumefit.contexts.rendering.logger import log_plan_summary
from resumefit.utils.event_logging import log_pipeline_event
from resumefit.utils.timestamp import session_stamp

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))

# suggestedTemplate hint from the extraction stage -> template key
SUGGESTED_TEMPLATE_KEYS = {
    "single-column": "A",
    "two-column": "B",
    "modern": "D",
}
DEFAULT_TEMPLATE = "A"


app = typer.Typer(
    help="Decide and validate one-page resume layouts",
    add_completion=False,
    invoke_without_command=True,
)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def _fail(message: str) -> None:
    typer.secho(f"Error: {message}\n", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


@app.command("decide")
def decide_command(
    blocks_path: Annotated[
        Path,
        typer.Argument(help="Extraction result JSON (or a bare list of blocks)"),
    ],
    template: Annotated[
        Optional[str],
        typer.Option(
            "--template",
            "-t",
            help="Template key or name (default: from suggestedTemplate, else A)",
        ),
    ] = None,
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Write the decision JSON here"),
    ] = None,
    report: Annotated[
        Optional[Path],
        typer.Option("--report", help="Write a Markdown layout report here"),
    ] = None,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print the decision JSON instead of the placement table"),
    ] = False,
    no_cache: Annotated[
        bool,
        typer.Option("--no-cache", help="Always recompute instead of reading the decision cache"),
    ] = False,
    cache_dir: Annotated[
        Optional[Path],
        typer.Option("--cache-dir", help="Decision cache directory (default: LAYOUT_CACHE_PATH)"),
    ] = None,
    log_dir: Annotated[
        Optional[Path],
        typer.Option("--log-dir", help="Log directory for this session"),
    ] = None,
    strict: Annotated[
        bool,
        typer.Option("--strict", help="Exit with code 2 when content does not fit"),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show ladder steps on the console"),
    ] = False,
):
    """
    Decide a one-page layout for extracted resume blocks.

    Not fitting is a normal outcome: the decision carries the remaining
    overflow and recommendations. Use --strict to turn it into exit code 2.

    Examples:\n

        $ resumefit decide res_42.json                  # Placement table

        $ resumefit decide res_42.json -t B --json      # Decision JSON on stdout
    """
    resume_name = blocks_path.stem
    log_dir = log_dir or LOGS_PATH / f"layout_{session_stamp()}"

    try:
        extraction = load_extraction_result(blocks_path)
    except FileNotFoundError:
        _fail(f"Blocks file not found: {blocks_path}")
    except json.JSONDecodeError as e:
        _fail(f"Blocks file is not valid JSON: {e}")
    except BlockIntegrityError as e:
        _fail(str(e))

    template_name = template or SUGGESTED_TEMPLATE_KEYS.get(
        extraction.suggested_template or "", DEFAULT_TEMPLATE
    )
    try:
        constraints = TemplateRegistry().get(template_name)
    except (UnknownTemplateError, InvalidConstraintsError) as e:
        _fail(str(e))

    setup_layout_logger(log_dir, template_name=constraints.name, verbose=verbose)
    log_decision_start(resume_name, constraints.name, len(extraction.blocks))

    start_time = time.time()
    try:
        if no_cache:
            decision, cache_hit = decide_layout(extraction.blocks, constraints), False
        else:
            decision, cache_hit = DecisionCache(cache_dir).get_or_decide(
                extraction.blocks, constraints
            )
    except (BlockIntegrityError, InvalidConstraintsError) as e:
        _fail(str(e))
    elapsed_time = time.time() - start_time

    log_decision_result(resume_name, decision, elapsed_time)
    log_plan_summary(build_render_plan(extraction.blocks, decision, constraints))

    errors = validate_layout(extraction.blocks, decision, constraints)
    log_validation_result(resume_name, errors)

    log_pipeline_event(
        event_type="layout_decided",
        resume_name=resume_name,
        source="layout",
        template=constraints.name,
        fits=decision.fits,
        overflow_lines=decision.overflow.to_dict()["overflowLines"],
        warnings=len(decision.warnings),
        cache_hit=cache_hit,
        decision_time_s=round(elapsed_time, 4),
    )

    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(decision.to_json(), encoding="utf-8")
    if report:
        report.parent.mkdir(parents=True, exist_ok=True)
        report.write_text(
            render_layout_report(decision, extraction.blocks, constraints), encoding="utf-8"
        )

    if as_json:
        typer.echo(decision.to_json())
    else:
        typer.echo(format_placement_table(decision, extraction.blocks))
        if output:
            typer.echo(f"  Decision: {output}")
        if report:
            typer.echo(f"  Report: {report}")

    if errors:
        for error in errors:
            typer.secho(f"  - {error}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    if strict and not decision.fits:
        raise typer.Exit(code=2)


@app.command("validate")
def validate_command(
    blocks_path: Annotated[
        Path,
        typer.Argument(help="Extraction result JSON (or a bare list of blocks)"),
    ],
    decision_path: Annotated[
        Path,
        typer.Argument(help="Layout decision JSON"),
    ],
    template: Annotated[
        Optional[str],
        typer.Option(
            "--template",
            "-t",
            help="Also check against this template (default: the decision's own template)",
        ),
    ] = None,
):
    """
    Check a stored layout decision against its block set.

    Examples:\n

        $ resumefit validate res_42.json layout.json

        $ resumefit validate res_42.json layout.json -t B
    """
    try:
        extraction = load_extraction_result(blocks_path)
        decision = LayoutDecision.from_dict(json.loads(decision_path.read_text(encoding="utf-8")))
    except FileNotFoundError as e:
        _fail(f"File not found: {e.filename}")
    except (json.JSONDecodeError, KeyError, BlockIntegrityError) as e:
        _fail(f"Could not load inputs: {e}")

    registry = TemplateRegistry()
    try:
        constraints = registry.get(template or decision.template_name)
    except UnknownTemplateError as e:
        if template:
            _fail(str(e))
        constraints = None
    except InvalidConstraintsError as e:
        _fail(str(e))

    errors = validate_layout(extraction.blocks, decision, constraints)

    log_pipeline_event(
        event_type="layout_validated",
        resume_name=blocks_path.stem,
        source="cli",
        template=decision.template_name,
        valid=not errors,
        errors=len(errors),
    )

    if not errors:
        typer.secho("✓ Layout decision is consistent", fg=typer.colors.GREEN, bold=True)
        typer.echo(f"  Placed blocks: {len(decision.placement)}")
        typer.echo(f"  Fits: {'yes' if decision.fits else 'no'}")
        raise typer.Exit(code=0)

    typer.secho(f"✗ {len(errors)} validation errors", fg=typer.colors.RED, bold=True)
    for error in errors:
        typer.secho(f"  - {error}", fg=typer.colors.RED)
    raise typer.Exit(code=1)


@app.command("templates")
def templates_command():
    """List the template constraint table."""
    for constraints in TemplateRegistry().list_templates():
        sidebar = (
            f", sidebar {constraints.sidebar.max_lines}"
            f" ({', '.join(constraints.sidebar.preferred_categories)})"
            if constraints.sidebar
            else ""
        )
        typer.secho(f"{constraints.key}: {constraints.name}", bold=True)
        typer.echo(
            f"  {constraints.layout_type}, {constraints.max_lines} lines "
            f"(header {constraints.header.max_lines}, main {constraints.main.max_lines}{sidebar})"
        )
        fonts = constraints.font_sizes
        typer.echo(
            f"  fonts: name {fonts.name}, heading {fonts.heading}, "
            f"body {fonts.body} (min {fonts.min_body})"
        )


if __name__ == "__main__":
    app()
