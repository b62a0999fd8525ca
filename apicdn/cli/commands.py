import os

from pulumi.automation import CommandError
from rich.console import Console
from rich.table import Table

from apicdn.aws.cloudfront import ApiCdn, Behavior
from apicdn.deploy import open_stack

console = Console()


def _handle_error(error: CommandError) -> None:
    if os.getenv("APICDN_DEBUG", "0") == "1":
        raise error
    console.print(f"[bold red]✗[/bold red] {error}")
    raise SystemExit(1) from None


def _print_output(line: str) -> None:
    console.out(line, highlight=False)


def run_diff(env: str) -> None:
    with console.status("Loading app..."):
        stack = open_stack(env)
    console.print(f"Diff for [bold]{stack.name}[/bold]")
    try:
        stack.preview(on_output=_print_output)
    except CommandError as e:
        _handle_error(e)


def run_deploy(env: str) -> None:
    with console.status("Loading app..."):
        stack = open_stack(env)
    console.print(f"Deploying [bold]{stack.name}[/bold]")
    try:
        result = stack.up(on_output=_print_output)
    except CommandError as e:
        _handle_error(e)
    else:
        for key, output in result.outputs.items():
            console.print(f"  {key}: [cyan]{output.value}[/cyan]", highlight=False)
        console.print("[bold green]✓[/bold green] Deployed")


def run_destroy(env: str) -> None:
    with console.status("Loading app..."):
        stack = open_stack(env)
    console.print(f"Destroying [bold]{stack.name}[/bold]")
    try:
        stack.destroy(on_output=_print_output)
    except CommandError as e:
        _handle_error(e)
    else:
        console.print("[bold green]✓[/bold green] Destroyed")


def _cache_policy_label(behavior: Behavior) -> str:
    policy_id = behavior.options.cache_policy_id
    return "API cache policy" if policy_id is None else f"managed {policy_id}"


def rules_table(cdn: ApiCdn) -> Table:
    table = Table(title="Web ACL rules")
    table.add_column("Priority", justify="right")
    table.add_column("Name")
    table.add_column("Statement")
    table.add_column("Action")
    for rule in cdn.rules:
        statement = rule["statement"]
        if "rate_based_statement" in statement:
            rate = statement["rate_based_statement"]
            description = f"rate {rate['limit']}/5min per {rate['aggregate_key_type']}"
        else:
            group = statement["managed_rule_group_statement"]
            description = f"{group['vendor_name']} {group['name']}"
            if version := group.get("version"):
                description += f" ({version})"
        action = "block" if "action" in rule else "group actions"
        table.add_row(str(rule["priority"]), rule["name"], description, action)
    return table


def behaviors_table(cdn: ApiCdn) -> Table:
    table = Table(title="Behaviors")
    table.add_column("Path pattern")
    table.add_column("Origin")
    table.add_column("Origin protocol")
    table.add_column("Cache policy")
    for behavior in [*cdn.behaviors, cdn.default_behavior]:
        table.add_row(
            behavior.path_pattern,
            behavior.origin.describe(),
            behavior.origin.protocol_policy,
            _cache_policy_label(behavior),
        )
    return table


def render_plan(cdn: ApiCdn) -> None:
    console.print(rules_table(cdn))
    console.print(behaviors_table(cdn))
    statuses = ", ".join(str(e.http_status) for e in cdn.error_responses)
    ttl = cdn.error_responses[0].ttl
    console.print(f"Error responses {statuses} cached for {ttl}s", highlight=False)
