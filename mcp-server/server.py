#!/usr/bin/env python3
"""MCP Server for Leap Planner.

This server exposes the take-home, trajectory, leap stack and rent
engines as MCP tools, allowing AI assistants to answer questions about a
user's plan.
"""

import os
import sys
import json
import asyncio
from typing import Any

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import Tool, TextContent

from tools import LeapPlannerTools


# Create the MCP server
server = Server("leap-planner")

# Global tools instance (initialized on startup)
tools: LeapPlannerTools | None = None


def get_tools() -> LeapPlannerTools:
    """Get or initialize the tools instance."""
    global tools
    if tools is None:
        # Default profile can be set via LEAP_PLANNER_PROFILE env var
        default_profile = os.environ.get('LEAP_PLANNER_PROFILE')
        base_path = os.path.join(os.path.dirname(__file__), '..')
        tools = LeapPlannerTools(base_path, default_profile)
    return tools


# Common profile parameter schema
PROFILE_PARAM = {
    "type": "string",
    "description": "The profile name (folder in input-parameters). If not specified, uses the default profile. Use list_profiles to see available profiles."
}

STATE_PARAM = {
    "type": "string",
    "description": "Two-letter state code, e.g. 'CA'"
}

CONTRIBUTION_PROPERTIES = {
    "gross_annual": {"type": "number", "description": "Gross annual salary"},
    "current_401k_pct": {"type": "number", "description": "Current 401(k) contribution, percent of salary"},
    "optimized_401k_pct": {"type": "number", "description": "Optional: contribution percent to compare against. Defaults to the recommended leap."},
    "has_employer_match": {"type": "boolean", "description": "Whether the employer matches contributions"},
    "match_cap_pct": {"type": "number", "description": "Percent of salary the employer matches up to (default 5)"},
    "match_rate_pct": {"type": "number", "description": "Employer match rate in percent (default 100)"},
    "real_return": {"type": "number", "description": "Annual real return as a fraction (default 0.07)"},
}


@server.list_tools()
async def list_tools() -> list[Tool]:
    """List available leap planner tools."""
    return [
        Tool(
            name="list_profiles",
            description="List all available planning profiles with salary, state and next leap. Use this to see which profiles are available.",
            inputSchema={
                "type": "object",
                "properties": {},
                "required": []
            }
        ),
        Tool(
            name="reload_profiles",
            description="Reload all profiles from disk. Use this after adding, modifying, or removing profile.json files to refresh the cache without restarting the server.",
            inputSchema={
                "type": "object",
                "properties": {},
                "required": []
            }
        ),
        Tool(
            name="estimate_tax",
            description="Estimate federal, state and FICA taxes and take-home pay for a gross salary in a state.",
            inputSchema={
                "type": "object",
                "properties": {
                    "salary_annual": {"type": "number", "description": "Gross annual salary"},
                    "state": STATE_PARAM
                },
                "required": ["salary_annual", "state"]
            }
        ),
        Tool(
            name="solve_gross",
            description="Find the gross salary that produces a target annual take-home pay in a state.",
            inputSchema={
                "type": "object",
                "properties": {
                    "take_home_annual": {"type": "number", "description": "Target annual take-home pay"},
                    "state": STATE_PARAM
                },
                "required": ["take_home_annual", "state"]
            }
        ),
        Tool(
            name="run_trajectory",
            description="Project baseline vs. optimized 401(k) balances year by year over 30 years in today's dollars.",
            inputSchema={
                "type": "object",
                "properties": CONTRIBUTION_PROPERTIES,
                "required": ["gross_annual", "current_401k_pct"]
            }
        ),
        Tool(
            name="cost_of_delay",
            description="Estimate how much net worth is lost at 30 years by waiting before raising 401(k) contributions.",
            inputSchema={
                "type": "object",
                "properties": {
                    **CONTRIBUTION_PROPERTIES,
                    "delay_months": {"type": "integer", "description": "Months of delay (default 12)"}
                },
                "required": ["gross_annual", "current_401k_pct"]
            }
        ),
        Tool(
            name="net_worth_impact",
            description="Net worth impact at 1, 10 and 30 years of a recurring monthly change, invested, held as cash, or applied to debt.",
            inputSchema={
                "type": "object",
                "properties": {
                    "monthly_delta": {"type": "number", "description": "Monthly amount; negative for a monthly cost"},
                    "use_case": {"type": "string", "enum": ["investing", "cash", "debt"], "description": "What the money does (default investing)"},
                    "real_return": {"type": "number", "description": "Annual real return as a fraction (default 0.07)"},
                    "debt_apr_pct": {"type": "number", "description": "Debt APR in percent for the debt use case (default 18)"}
                },
                "required": ["monthly_delta"]
            }
        ),
        Tool(
            name="rent_plan",
            description="Safe rent range (28-35% of take-home after debt), upfront cash needed before the first paycheck, and a 50/30/20 budget. Uses the profile's take-home when take_home_monthly is omitted.",
            inputSchema={
                "type": "object",
                "properties": {
                    "take_home_monthly": {"type": "number", "description": "Monthly take-home pay"},
                    "debt_monthly": {"type": "number", "description": "Monthly debt payments (default 0)"},
                    "profile": PROFILE_PARAM
                },
                "required": []
            }
        ),
        Tool(
            name="recommended_leap",
            description="The single 401(k) move to recommend: capture the employer match, increase contributions, or already at the annual limit.",
            inputSchema={
                "type": "object",
                "properties": {
                    "has_employer_match": {"type": "boolean", "description": "Whether the employer matches contributions"},
                    "match_cap_pct": {"type": "number", "description": "Percent of salary the employer matches up to"},
                    "current_401k_pct": {"type": "number", "description": "Current 401(k) contribution, percent of salary"},
                    "salary_annual": {"type": "number", "description": "Optional: gross annual salary, used to detect the annual limit"}
                },
                "required": ["has_employer_match", "match_cap_pct", "current_401k_pct"]
            }
        ),
        Tool(
            name="build_leap_stack",
            description="Ranked leap stack for a profile: 401(k) match, HSA, emergency fund, high-APR debt and retirement/brokerage split, with the next leap and monthly routing.",
            inputSchema={
                "type": "object",
                "properties": {
                    "profile": PROFILE_PARAM
                },
                "required": []
            }
        ),
        Tool(
            name="capital_routing",
            description="Route a monthly post-tax savings pool across emergency fund, high-APR debt, retirement and brokerage.",
            inputSchema={
                "type": "object",
                "properties": {
                    "post_tax_savings_monthly": {"type": "number", "description": "Monthly savings pool"},
                    "ef_current": {"type": "number", "description": "Current emergency fund balance (default 0)"},
                    "unlock": {
                        "type": "object",
                        "description": "Optional unlock answers: essential_monthly, carries_balance, debt_apr_range, debt_balance, retirement_focus"
                    }
                },
                "required": ["post_tax_savings_monthly"]
            }
        ),
        Tool(
            name="primary_leap",
            description="The primary leap for a profile (match, retirement_15, debt or growth_split) and its supporting leaps.",
            inputSchema={
                "type": "object",
                "properties": {
                    "profile": PROFILE_PARAM
                },
                "required": []
            }
        ),
        Tool(
            name="stack_preview",
            description="Five-step preview of the full stack shown before the plan is unlocked.",
            inputSchema={
                "type": "object",
                "properties": {
                    "has_employer_match": {"type": "boolean", "description": "Whether the employer matches contributions"},
                    "current_401k_pct": {"type": "number", "description": "Current 401(k) contribution, percent of salary"},
                    "match_cap_pct": {"type": "number", "description": "Percent of salary the employer matches up to (default 5)"}
                },
                "required": ["has_employer_match", "current_401k_pct"]
            }
        ),
        Tool(
            name="market_rent",
            description="Market rent range for a metro from ZORI medians, optionally compared to a safe rent range. Lists the state's metros when no match is found.",
            inputSchema={
                "type": "object",
                "properties": {
                    "metro": {"type": "string", "description": "Metro name, e.g. 'Austin'"},
                    "state": STATE_PARAM,
                    "safe_low": {"type": "number", "description": "Optional: low end of the safe rent range"},
                    "safe_high": {"type": "number", "description": "Optional: high end of the safe rent range"}
                },
                "required": ["metro", "state"]
            }
        )
    ]


CONTRIBUTION_ARGS = ("optimized_401k_pct", "has_employer_match", "match_cap_pct", "match_rate_pct", "real_return")


def _optional(arguments: dict[str, Any], keys) -> dict[str, Any]:
    return {key: arguments[key] for key in keys if key in arguments}


@server.call_tool()
async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
    """Handle tool calls."""
    try:
        lp_tools = get_tools()
        profile = arguments.get("profile")

        if name == "list_profiles":
            result = lp_tools.list_profiles()
        elif name == "reload_profiles":
            result = lp_tools.reload_profiles()
        elif name == "estimate_tax":
            result = lp_tools.estimate_tax(arguments["salary_annual"], arguments["state"])
        elif name == "solve_gross":
            result = lp_tools.solve_gross(arguments["take_home_annual"], arguments["state"])
        elif name == "run_trajectory":
            result = lp_tools.run_trajectory(
                arguments["gross_annual"],
                arguments["current_401k_pct"],
                **_optional(arguments, CONTRIBUTION_ARGS)
            )
        elif name == "cost_of_delay":
            result = lp_tools.cost_of_delay(
                arguments["gross_annual"],
                arguments["current_401k_pct"],
                **_optional(arguments, CONTRIBUTION_ARGS + ("delay_months",))
            )
        elif name == "net_worth_impact":
            result = lp_tools.net_worth_impact(
                arguments["monthly_delta"],
                **_optional(arguments, ("use_case", "real_return", "debt_apr_pct"))
            )
        elif name == "rent_plan":
            result = lp_tools.rent_plan(
                arguments.get("take_home_monthly"),
                arguments.get("debt_monthly", 0),
                profile
            )
        elif name == "recommended_leap":
            result = lp_tools.recommended_leap(
                arguments["has_employer_match"],
                arguments["match_cap_pct"],
                arguments["current_401k_pct"],
                arguments.get("salary_annual", 0)
            )
        elif name == "build_leap_stack":
            result = lp_tools.build_leap_stack(profile)
        elif name == "capital_routing":
            result = lp_tools.capital_routing(
                arguments["post_tax_savings_monthly"],
                arguments.get("ef_current", 0),
                arguments.get("unlock")
            )
        elif name == "primary_leap":
            result = lp_tools.primary_leap(profile)
        elif name == "stack_preview":
            result = lp_tools.stack_preview(
                arguments["has_employer_match"],
                arguments["current_401k_pct"],
                **_optional(arguments, ("match_cap_pct",))
            )
        elif name == "market_rent":
            result = lp_tools.market_rent(
                arguments["metro"],
                arguments["state"],
                arguments.get("safe_low"),
                arguments.get("safe_high")
            )
        else:
            result = {"error": f"Unknown tool: {name}"}

        return [TextContent(
            type="text",
            text=json.dumps(result, indent=2, default=str)
        )]
    except Exception as e:
        return [TextContent(
            type="text",
            text=json.dumps({"error": str(e)}, indent=2)
        )]


async def main():
    """Run the MCP server."""
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


if __name__ == "__main__":
    asyncio.run(main())
