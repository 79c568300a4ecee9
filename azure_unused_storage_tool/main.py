# azure_unused_storage_tool/main.py
"""Main script execution and orchestration."""

# Standard Library Imports
import argparse
import os
import sys

# Third-Party Imports
from dotenv import load_dotenv

# Local Imports from the 'azure_unused_storage_tool' package
from .azure_utils import AzureStorageSource, get_credential, resolve_subscription_id
from .config import LOGGER_NAME, ScanConfig, parse_export_flag
from .exceptions import AuthError, ExportWriteError, ScopeNotFoundError
from .logger_config import setup_logger
from .reporting import export_csv, print_progress, print_report
from .scanner import scan_storage_accounts

logger = setup_logger(LOGGER_NAME)


def non_negative_int(value):
    try:
        days = int(value)
    except (TypeError, ValueError):
        raise argparse.ArgumentTypeError(f"invalid integer value: '{value}'")
    if days < 0:
        raise argparse.ArgumentTypeError(f"must be 0 or greater, got {days}")
    return days


def build_parser():
    """Builds the CLI parser. Environment variables supply defaults for every flag."""
    subscription = os.environ.get("AZURE_SUBSCRIPTION_ID")
    resource_group = os.environ.get("AZURE_RESOURCE_GROUP")
    days_ago = os.environ.get("DAYS_AGO")

    parser = argparse.ArgumentParser(
        description="Report Azure storage accounts whose blobs were not modified in the last N days."
    )
    parser.add_argument(
        "--subscription",
        default=subscription,
        required=subscription is None,
        help="Subscription name or id (env: AZURE_SUBSCRIPTION_ID)"
    )
    parser.add_argument(
        "--resource-group",
        default=resource_group,
        required=resource_group is None,
        help="Resource group holding the storage accounts (env: AZURE_RESOURCE_GROUP)"
    )
    parser.add_argument(
        "--days-ago",
        type=non_negative_int,
        default=days_ago,
        required=days_ago is None,
        help="Accounts with no blob modified within this many days are reported (env: DAYS_AGO)"
    )
    parser.add_argument(
        "--export-csv",
        default=os.environ.get("EXPORT_CSV", "n"),
        help="'y' to also write UnusedStorageAccounts.csv (default: n, env: EXPORT_CSV)"
    )
    parser.add_argument(
        "--output-dir",
        default=None,
        help="Directory for the CSV file (default: current directory)"
    )
    return parser


def main(argv=None):
    """Main execution function: Loads config, authenticates, scans, reports. Returns the exit code."""
    load_dotenv()
    setup_logger(LOGGER_NAME, os.environ.get("LOG_LEVEL", "INFO"))
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.subscription or not args.resource_group:
        parser.error("--subscription and --resource-group cannot be empty")
    logger.info("Script starting.")

    # --- Azure Client Initialization ---
    try:
        credential = get_credential()
        subscription_id = resolve_subscription_id(credential, args.subscription)
        source = AzureStorageSource(credential, subscription_id)
    except (AuthError, ScopeNotFoundError) as e:
        logger.critical(f"{e} Exiting.")
        return 1
    except Exception as e:
        logger.critical(f"Failed to initialize Azure clients: {e}. Exiting.", exc_info=True)
        return 1

    config = ScanConfig(
        subscription_id=subscription_id,
        resource_group=args.resource_group,
        staleness_threshold_days=args.days_ago,
        export_csv=parse_export_flag(args.export_csv),
    )
    logger.info(f"Subscription ID: {'*' * (len(subscription_id) - 4)}{subscription_id[-4:]}")
    logger.info(f"Resource Group: {config.resource_group}")
    logger.info(f"Days ago: {config.staleness_threshold_days}")
    logger.info(f"CSV export enabled: {config.export_csv}")

    # --- Scan ---
    try:
        result = scan_storage_accounts(source, config, on_progress=print_progress)
    except (AuthError, ScopeNotFoundError) as e:
        logger.critical(f"{e} Exiting.")
        return 1
    except Exception as e:
        logger.critical(f"An unexpected error occurred during the scan: {e}", exc_info=True)
        return 1

    # --- Report ---
    print_report(result)
    if config.export_csv:
        if result.unused_accounts:
            try:
                path = export_csv(result.unused_accounts, args.output_dir)
                print(f"\nUnused storage accounts exported to {path}")
            except ExportWriteError as e:
                logger.error(str(e))
                print(f"\nCSV export failed: {e}")
        else:
            print("\nNothing to export.")

    logger.info("Script finished.")
    return 0


def run():
    sys.exit(main())


if __name__ == "__main__":
    run()
