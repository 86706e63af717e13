"""
Authority Engine CLI

Read-only inspection of an organization structure: the hierarchy, what
each agent may do, and why. Runs against the built-in sample organization
unless --data points at a JSON structure file.

Usage:
    authority tree
    authority agent agt-fin-recon
    authority actions agt-fin-recon
    authority verdict agt-fin-recon generic_update_record
    authority readiness agt-fin-recon generic_update_record
    authority ethics agt-cust-triage generic_escalate --describe
    authority export-sample --out structure.json
"""

import json
from pathlib import Path
from typing import Any, NoReturn, Optional

import typer
from typing_extensions import Annotated

from authority_engine.engine import AuthorityEngine
from authority_engine.hierarchy.sample import dump_structure, load_structure, sample_structure
from authority_engine.kernel.errors import NotFoundError
from authority_engine.kernel.logging import configure_logging
from authority_engine.persona.ethics import get_ethical_frame_summary

# Logs go to stderr; stdout carries command output
configure_logging(json_output=False, log_level="INFO")

app = typer.Typer(
    name="authority",
    help="Authority Engine - How authority flows from organization to agent",
    add_completion=False,
)

DataOption = Annotated[
    Optional[Path],
    typer.Option("--data", help="Organization structure JSON (default: built-in sample)"),
]
JsonOption = Annotated[bool, typer.Option("--json", help="Output as JSON")]


def get_engine(data: Optional[Path] = None) -> AuthorityEngine:
    """Engine over the given structure file, or the sample organization"""
    if data is None:
        return AuthorityEngine.with_sample_data()
    if not data.exists():
        typer.echo(f"Error: Structure file not found: {data}", err=True)
        raise typer.Exit(1)
    return AuthorityEngine(load_structure(data))


def echo_json(model: Any) -> None:
    typer.echo(json.dumps(model.model_dump(mode="json"), indent=2))


def fail(error: NotFoundError) -> NoReturn:
    typer.echo(f"Error: {error}", err=True)
    raise typer.Exit(1)


@app.command()
def tree(data: DataOption = None, json_output: JsonOption = False) -> None:
    """Show the organization, its domains and agents with effective authority"""
    engine = get_engine(data)
    structure = engine.structure

    if json_output:
        echo_json(structure)
        return

    org = structure.organization
    typer.echo(f"{org.name} [{org.status.value}] ceiling {org.authority_ceiling}")
    for domain in structure.domains:
        typer.echo(f"  {domain.name} ({domain.id}) ceiling {domain.authority_ceiling}")
        for agent in structure.agents_in_domain(domain.id):
            authority = engine.authority_for_agent(agent.id)
            typer.echo(
                f"    {agent.name} ({agent.id}) effective authority "
                f"{authority.effective_authority_level}"
            )


@app.command()
def agent(
    agent_id: Annotated[str, typer.Argument(help="Agent ID")],
    data: DataOption = None,
    json_output: JsonOption = False,
) -> None:
    """Show how an agent's effective authority was derived"""
    engine = get_engine(data)
    try:
        authority = engine.authority_for_agent(agent_id)
    except NotFoundError as e:
        fail(e)

    if json_output:
        echo_json(authority)
        return

    typer.echo(f"Agent: {agent_id}")
    typer.echo(f"  Effective authority: {authority.effective_authority_level}")
    typer.echo("  Source path:")
    for entry in authority.authority_source_path:
        typer.echo(f"    {entry.level.value}: {entry.name} (ceiling {entry.ceiling})")
    typer.echo("  Reasoning:")
    for step in authority.reasoning:
        typer.echo(f"    [{step.impact.value}] {step.level.value}: {step.rule}")
    if authority.blocked_actions:
        typer.echo("  Blocked:")
        for blocked in authority.blocked_actions:
            typer.echo(f"    - {blocked}")


@app.command()
def actions(
    agent_id: Annotated[str, typer.Argument(help="Agent ID")],
    data: DataOption = None,
    json_output: JsonOption = False,
) -> None:
    """List an agent's action surface and concrete do-actions"""
    engine = get_engine(data)
    try:
        surface = engine.action_surface(agent_id)
        do_actions = engine.do_actions(agent_id)
    except NotFoundError as e:
        fail(e)

    if json_output:
        typer.echo(
            json.dumps(
                {
                    "action_surface": surface.model_dump(mode="json"),
                    "do_actions": do_actions.model_dump(mode="json"),
                },
                indent=2,
            )
        )
        return

    typer.echo("Action surface:")
    for status in surface.actions:
        typer.echo(f"  {status.label}: {status.state.value}")
    typer.echo("Do-actions:")
    for action in do_actions.actions:
        typer.echo(f"  {action.id}: {action.verb_phrase} [{action.state.value}]")
        typer.echo(f"    {action.reason}")


@app.command()
def verdict(
    agent_id: Annotated[str, typer.Argument(help="Agent ID")],
    action_id: Annotated[str, typer.Argument(help="Do-action ID")],
    data: DataOption = None,
    json_output: JsonOption = False,
) -> None:
    """Show the runtime verdict for an agent attempting an action"""
    engine = get_engine(data)
    try:
        result = engine.verdict(agent_id, action_id)
    except NotFoundError as e:
        fail(e)

    if json_output:
        echo_json(result)
        return

    typer.echo(f"Verdict: {result.verdict_id}")
    typer.echo(f"  Decision: {result.decision.status.value} ({result.decision.confidence.value})")
    typer.echo(f"  Summary: {result.reasoning.summary}")
    typer.echo("  Constraints:")
    for constraint in result.reasoning.applied_constraints:
        typer.echo(f"    {constraint.source.value}: {constraint.description}")
    if result.escalation is not None:
        typer.echo(f"  Escalation: {result.escalation.expected_approver_role}")


@app.command()
def readiness(
    agent_id: Annotated[str, typer.Argument(help="Agent ID")],
    action_id: Annotated[str, typer.Argument(help="Do-action ID")],
    data: DataOption = None,
    json_output: JsonOption = False,
) -> None:
    """Show execution readiness and its four gates"""
    engine = get_engine(data)
    try:
        result = engine.readiness(agent_id, action_id)
    except NotFoundError as e:
        fail(e)

    if json_output:
        echo_json(result)
        return

    typer.echo(f"Readiness: {result.state.value}")
    typer.echo(f"  {result.summary}")
    gates = {
        "Authority alignment": result.gates.authority_alignment,
        "Action surface compatibility": result.gates.action_surface_compatibility,
        "Escalation resolution": result.gates.escalation_resolution,
        "Persona alignment": result.gates.persona_alignment,
    }
    for name, gate in gates.items():
        mark = "✓" if gate.passed else "✗"
        typer.echo(f"  {mark} {name}: {gate.reason}")


@app.command()
def ethics(
    agent_id: Annotated[str, typer.Argument(help="Agent ID")],
    action_id: Annotated[str, typer.Argument(help="Do-action ID")],
    describe: Annotated[
        bool, typer.Option("--describe", help="Also summarize the agent's ethical frame")
    ] = False,
    data: DataOption = None,
    json_output: JsonOption = False,
) -> None:
    """Run the ethical veto for an agent's action"""
    engine = get_engine(data)
    try:
        result = engine.evaluate_ethics(agent_id, action_id)
        persona = engine.persona_for(agent_id)
    except NotFoundError as e:
        fail(e)

    if result is None or persona is None:
        typer.echo(f"No persona registered for {agent_id}; no ethical constraints apply")
        return

    if json_output:
        echo_json(result)
        return

    typer.echo(f"Ethics: {result.verdict.value}")
    typer.echo(f"  {result.explanation}")
    if describe:
        typer.echo(f"  Persona: {persona.role_identity.role_name}")
        typer.echo(f"  Frame: {get_ethical_frame_summary(persona)}")


@app.command("export-sample")
def export_sample(
    out: Annotated[Path, typer.Option("--out", help="Where to write the structure JSON")],
) -> None:
    """Write the sample organization as a structure file for --data"""
    dump_structure(sample_structure(), out)
    typer.echo(f"✓ Wrote sample structure: {out}")


def main() -> None:
    """Main entry point"""
    app()


if __name__ == "__main__":
    main()
