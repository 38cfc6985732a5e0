"""
Entry point for the WordPress to Hygraph migration tool.
"""

import sys

from dotenv import load_dotenv

from wp_hygraph.migration_tool import HygraphMigrationTool
from wp_hygraph.utils.pre_flight_checks import PreFlightCheckError

CONFIG_FILE = "config/migration_config.json"


def main():
    """
    Main function to run the WordPress to Hygraph migration tool.
    """
    load_dotenv()
    tool = HygraphMigrationTool(config_file=CONFIG_FILE)

    try:
        tool.check()
    except PreFlightCheckError as e:
        tool.log_message(f"❌ {e}", level="ERROR")
        sys.exit(1)

    tool.log_message("Starting WordPress to Hygraph migration.")
    tool.migrate()
    tool.log_message("Migration process finished.")


if __name__ == "__main__":
    main()
