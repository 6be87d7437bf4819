import sys
import os
import json
import logging
import argparse
from planner_config import PlannerConfig
from tax.FederalDetails import FederalDetails
from tax.StateDetails import StateDetails
from tax.TaxEstimator import create_tax_estimator
from calc.plan_calculator import PlanCalculator
from market.zori_store import ZoriDataStore
from model.validation import InputValidationError, validate_email
from render.renderers import RENDERER_REGISTRY
from render.pdf_renderer import PlanPdfRenderer
from notify.email import ResendEmailSender, build_leap_plan_email, build_rent_plan_email
from notify.waitlist import WaitlistStore


def load_profile(profile_name: str, base_path: str = None) -> dict:
    """Load input-parameters/<profile_name>/profile.json.

    Args:
        profile_name: Name of the profile folder in input-parameters
        base_path: Repository root (defaults to the parent of src/)

    Returns:
        The profile dictionary

    Raises:
        FileNotFoundError: If the profile file does not exist
    """
    base_path = base_path or os.path.join(os.path.dirname(__file__), '..')
    profile_path = os.path.normpath(os.path.join(base_path, 'input-parameters', profile_name, 'profile.json'))
    if not os.path.exists(profile_path):
        raise FileNotFoundError(f"Profile file not found: {profile_path}")
    with open(profile_path, 'r') as f:
        return json.load(f)


def build_calculator(config: PlannerConfig) -> PlanCalculator:
    """Wire the reference data, tax estimator and market store for a config."""
    federal = FederalDetails()
    state = StateDetails()
    estimator = create_tax_estimator(config, federal, state)
    return PlanCalculator(estimator, federal, ZoriDataStore(config.zori_csv_path))


def send_plan_emails(config: PlannerConfig, plan_data, to: str) -> bool:
    """Record the signup and email the leap plan and the rent plan PDF.

    Returns:
        True when both emails were sent
    """
    waitlist = WaitlistStore(config)
    try:
        waitlist.submit(to, 'plan_email', 'cli')
    finally:
        waitlist.close()

    sender = ResendEmailSender(config)
    try:
        match_leap = plan_data.leap_stack.find('match')
        leap_message = build_leap_plan_email(
            config,
            salary=plan_data.prefill.salary_annual,
            state=plan_data.state,
            net_monthly=plan_data.tax.net_income_monthly,
            recommended_401k_pct=plan_data.recommendation.optimized_401k_pct,
            delta_30yr=plan_data.trajectory.delta_30yr,
            annual_contribution_increase=getattr(match_leap, 'annual_contribution_increase', None),
            leap_summary=plan_data.recommendation.summary,
        )
        rent_message = build_rent_plan_email(PlanPdfRenderer().render(plan_data.rent_plan))
        leap_sent = sender.send_message(to, leap_message)
        rent_sent = sender.send_message(to, rent_message)
    finally:
        sender.close()
    return leap_sent and rent_sent


def main():
    parser = argparse.ArgumentParser(
        description='Leap planner: take-home, 401(k) trajectory, leap stack and rent plan',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Modes:
  Leaps           Print the ranked leap stack and the primary leap (default)
  Trajectory      Print the baseline vs. optimized 401(k) trajectory
  Routing         Print how monthly post-tax savings are routed
  Rent            Print the safe rent range, upfront cash and budget
  NetWorthImpact  Print the net worth impact of a recurring monthly change
  Tax             Print the gross to take-home breakdown

Examples:
  python src/Program.py example
  python src/Program.py example --mode Trajectory
  python src/Program.py example --mode Rent --pdf rent-plan.pdf
  python src/Program.py example --email you@example.com
        """
    )
    parser.add_argument('profile_name', help='Name of the profile (folder in input-parameters)')
    parser.add_argument('--mode', '-m',
                        choices=list(RENDERER_REGISTRY.keys()),
                        default='Leaps',
                        help='Output mode (default: Leaps)')
    parser.add_argument('--pdf',
                        metavar='PATH',
                        help='Also write the rent plan PDF to PATH')
    parser.add_argument('--email',
                        metavar='ADDRESS',
                        help='Email the leap plan and the rent plan PDF to ADDRESS (needs RESEND_API_KEY)')
    parser.add_argument('--verbose', '-v',
                        action='store_true',
                        help='Enable debug logging')

    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format='%(asctime)s %(name)s %(levelname)s %(message)s')

    try:
        profile = load_profile(args.profile_name)
    except FileNotFoundError as e:
        print(str(e))
        sys.exit(1)

    config = PlannerConfig.from_env()
    calculator = build_calculator(config)
    try:
        plan_data = calculator.calculate(profile)
    except InputValidationError as e:
        print(f"Invalid profile '{args.profile_name}': {e.message}")
        sys.exit(1)

    renderer = RENDERER_REGISTRY[args.mode]()
    renderer.render(plan_data)

    if args.pdf:
        with open(args.pdf, 'wb') as f:
            f.write(PlanPdfRenderer().render(plan_data.rent_plan))
        print(f"Rent plan PDF written to {args.pdf}")

    if args.email:
        try:
            to = validate_email(args.email)
        except InputValidationError as e:
            print(e.message)
            sys.exit(1)
        if send_plan_emails(config, plan_data, to):
            print(f"Plan emailed to {to}")
        else:
            print("Email could not be sent (see log for details)")


if __name__ == "__main__":
    main()
