#!/usr/bin/env python3
"""
Plant Layout Optimizer - command-line entry point.

Evolves a non-overlapping arrangement of circular plants inside a
geometric domain. All run settings live in a YAML run configuration.

Exit status:
    0  a valid layout was found
    1  error (bad configuration, unreadable file, ...)
    2  the run finished without a valid layout
"""

import argparse
import sys

import matplotlib
matplotlib.use('Agg')

EXIT_CONVERGED = 0
EXIT_ERROR = 1
EXIT_NOT_CONVERGED = 2


def print_domain_types():
    from agro_ga.domains import list_domain_types

    print("Available domains:")
    for domain_type in list_domain_types():
        params = ", ".join(domain_type.required_parameters)
        print(f"  {domain_type.menu_id}. {domain_type.label:<15} ({params})")


def main(argv=None):
    """Main entry point with command-line argument parsing"""
    parser = argparse.ArgumentParser(
        description="Plant Layout Optimizer - evolutionary placement of plants in a domain",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python3 agro_cli.py examples/annulus_run.yaml             # Run with default progress output
  python3 agro_cli.py examples/annulus_run.yaml -p 10       # Progress every 10 generations
  python3 agro_cli.py examples/inventory_run.yaml --quiet   # Only the final report
  python3 agro_cli.py --list-domains                        # Show supported domain shapes
        """
    )

    parser.add_argument(
        'config',
        nargs='?',
        help='Run configuration file path'
    )

    parser.add_argument(
        '--progress-interval', '-p',
        type=int,
        default=50,
        metavar='N',
        help='Print progress every N generations (default: 50)'
    )

    parser.add_argument(
        '--quiet', '-q',
        action='store_true',
        help='Hide generation progress'
    )

    parser.add_argument(
        '--list-domains',
        action='store_true',
        help='List the supported domain shapes and their parameters'
    )

    args = parser.parse_args(argv)

    if args.list_domains:
        print_domain_types()
        return EXIT_CONVERGED

    if not args.config:
        parser.print_usage()
        print("Error: a run configuration file is required")
        return EXIT_ERROR

    try:
        from agro_ga.cli import run_from_config
        result = run_from_config(args.config, progress_interval=0 if args.quiet else args.progress_interval)
    except KeyboardInterrupt:
        print("\nOperation cancelled by user.")
        return EXIT_ERROR
    except Exception as e:
        print(f"Error: {e}")
        return EXIT_ERROR

    return EXIT_CONVERGED if result.converged else EXIT_NOT_CONVERGED


if __name__ == "__main__":
    sys.exit(main())
