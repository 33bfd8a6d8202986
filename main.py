#!/usr/bin/env python3
"""
evm-mirror: compare and clone verified smart contract sources

Main entry point for the CLI interface.
"""

import argparse
import logging
import sys

from cli.main import MirrorCLI
from mirror.errors import MirrorError


def setup_logging(verbose: bool):
    """Setup logging configuration."""
    log_level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="evm-mirror: compare and clone verified smart contract sources",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  evm-mirror verify 0xAbC... --source-root ./my-repo --chain-id 1
  evm-mirror diff 0xAbC... 0xDeF... --chain-id 8453
  evm-mirror clone 0xAbC... --output ./cloned --follow-proxy
        """
    )
    parser.add_argument('--verbose', '-v', action='store_true', help='Verbose output')
    parser.add_argument('--config', help='Path to the YAML configuration file')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    def add_network_options(sub):
        sub.add_argument('--chain-id', '-i', help='Chain ID of the network (default from config, usually 1)')
        sub.add_argument('--api-key', '-k', help='Explorer API key (overrides config and ETHERSCAN_API_KEY)')
        sub.add_argument('--follow-proxy', '-f', action='store_true', default=None,
                         help='Use the implementation contract when the address is a proxy')

    verify_parser = subparsers.add_parser('verify', help='Compare verified sources against a local directory')
    verify_parser.add_argument('contracts', nargs='+', help='Contract addresses to verify')
    verify_parser.add_argument('--source-root', '-r', required=True, help='Root path of the local source code')
    verify_parser.add_argument('--remappings', '-m',
                               help='Path to remappings.txt (default: <source-root>/remappings.txt)')
    add_network_options(verify_parser)

    diff_parser = subparsers.add_parser('diff', help='Compare the verified sources of two contracts')
    diff_parser.add_argument('address_a', help='First contract address')
    diff_parser.add_argument('address_b', help='Second contract address')
    add_network_options(diff_parser)

    clone_parser = subparsers.add_parser('clone', help='Clone verified sources into a Foundry project')
    clone_parser.add_argument('address', help='Contract address to clone')
    clone_parser.add_argument('--output', '-o', required=True, help='Output directory for the project')
    add_network_options(clone_parser)

    config_parser = subparsers.add_parser('config', help='Show or update configuration')
    config_parser.add_argument('--set-etherscan-key', help='Store the Etherscan API key')
    config_parser.add_argument('--show', action='store_true', help='Show current configuration')

    subparsers.add_parser('version', help='Show version information')

    return parser


def main(argv=None) -> int:
    """Main entry point for evm-mirror CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    setup_logging(args.verbose)

    try:
        from mirror.config_manager import ConfigManager
        from mirror.explorer_fetcher import ExplorerFetcher

        config_manager = ConfigManager(args.config) if args.config else ConfigManager()
        fetcher = ExplorerFetcher(config_manager, api_key=getattr(args, 'api_key', None))
        cli = MirrorCLI(config_manager=config_manager, fetcher=fetcher)

        if args.command == 'verify':
            return cli.run_verify(
                args.contracts,
                args.source_root,
                chain_id=args.chain_id,
                remappings_file=args.remappings,
                follow_proxy=args.follow_proxy,
            )
        elif args.command == 'diff':
            return cli.run_diff(args.address_a, args.address_b, chain_id=args.chain_id,
                                follow_proxy=args.follow_proxy)
        elif args.command == 'clone':
            return cli.run_clone(args.address, args.output, chain_id=args.chain_id,
                                 follow_proxy=args.follow_proxy)
        elif args.command == 'config':
            if args.set_etherscan_key:
                config_manager.set_etherscan_key(args.set_etherscan_key)
                print("✅ Configuration updated")
                return 0
            for key, value in config_manager.get_config_summary().items():
                print(f"  {key}: {value}")
            return 0
        elif args.command == 'version':
            cli.show_version()
            return 0

    except KeyboardInterrupt:
        print("\nOperation cancelled by user.")
        return 1
    except MirrorError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
