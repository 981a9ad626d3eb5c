"""
kmsctl - Main CLI interface
Manage KMS-encrypted secrets held in S3 buckets

Each subcommand maps to a handler in :mod:`kmsctl.modes`. Any error
raised by a handler is reported once as ``[error] ...`` on stderr and
the process exits with status 1.
"""
import sys
import signal
import argparse
from colorama import init

from . import __version__
from .exceptions import KmsctlError
from .services.aws.kms_operations import KmsOperations
from .services.aws.operations import S3Operations
from .services.transfer import TransferOrchestrator
from .utils.aws.aws_utils import create_boto3_session, build_clients
from .utils.config_loader import ConfigLoader, handle_config_update
from .utils.display.display_utils import print_error
from .utils.display.formatter import OutputFormatter, SUPPORTED_FORMATS

# Initialize colorama
init(autoreset=True)

# ── Help-text epilogs for subcommands ──────────────────────────────────────

KMS_EXAMPLES = """\
Examples:
  kmsctl kms
  kmsctl kms create --name secrets --description "secrets for the platform"
  kmsctl kms delete --name secrets
  kmsctl kms delete --name secrets --no-schedule-deletion
"""

BUCKETS_EXAMPLES = """\
Examples:
  kmsctl buckets
  kmsctl buckets create --name my-secrets
  kmsctl buckets delete --name my-secrets --force
"""

GET_EXAMPLES = """\
Examples:
  kmsctl get --bucket my-secrets
  kmsctl get --bucket my-secrets --recursive --flatten --output-dir /etc/secrets
  kmsctl get --bucket my-secrets --filter '\\.pem$' certs/
"""

PUT_EXAMPLES = """\
Examples:
  kmsctl put --bucket my-secrets --kms <KEY-ID> certs/
  kmsctl put --bucket my-secrets --kms alias/secrets --flatten ./db.yml
"""

EDIT_EXAMPLES = """\
Examples:
  kmsctl edit --bucket my-secrets config/db.yml
  kmsctl edit --local-file ./db.yml

The editor is taken from $EDITOR (default: vim).
"""

# argparse stores the alias actually typed, map it back to the verb
COMMAND_ALIASES = {
    'ls': 'list',
    'rm': 'delete',
}


class KmsCtl:
    """Main CLI application class.

    Holds the resolved configuration and output formatter, and builds
    the AWS clients on first use so commands which never reach AWS do
    not need credentials.
    """

    def __init__(self, config, output):
        self.config = config
        self.output = output
        self._session = None
        self._s3 = None
        self._kms = None
        self._transfer = None

        signal.signal(signal.SIGINT, self.signal_handler)

    def signal_handler(self, sig, frame):
        """Handle Ctrl+C without a traceback."""
        print_error("interrupted")
        sys.exit(130)

    def _clients(self):
        if self._session is None:
            self._session = create_boto3_session(
                self.config.get('region'),
                profile_name=self.config.get('profile') or None,
                credentials_file=self.config.get('credentials') or None,
                access_key=self.config.get('access_key') or None,
                secret_key=self.config.get('secret_key') or None,
                session_token=self.config.get('session_token') or None,
            )
            s3_client, kms_client = build_clients(self._session)
            self._s3 = S3Operations(s3_client, region=self.config.get('region'))
            self._kms = KmsOperations(kms_client)
        return self._s3, self._kms

    @property
    def s3(self) -> S3Operations:
        return self._clients()[0]

    @property
    def kms(self) -> KmsOperations:
        return self._clients()[1]

    @property
    def transfer(self) -> TransferOrchestrator:
        if self._transfer is None:
            self._transfer = TransferOrchestrator(self.s3)
        return self._transfer


# ── Argument Parser ────────────────────────────────────────────────────────

def create_argument_parser():
    """Create and configure the subparser-based argument parser."""
    parser = argparse.ArgumentParser(
        prog='kmsctl',
        description='kmsctl — a utility for interacting with s3 and kms encrypted files',
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')

    # Global flags; defaults come from the config file and environment
    parser.add_argument('-p', '--profile', help='the aws profile to use for static credentials')
    parser.add_argument('-c', '--credentials',
                        help='the path to the credentials file containing the aws profiles')
    parser.add_argument('--access-key', dest='access_key',
                        help='the aws access key to use to access the resources')
    parser.add_argument('--secret-key', dest='secret_key',
                        help='the aws secret key to use when accessing the resources')
    parser.add_argument('--session-token', dest='session_token',
                        help='the aws session token to use when accessing the resources')
    parser.add_argument('-r', '--region', help='the aws region where the resources are located')
    parser.add_argument('-f', '--format', choices=SUPPORTED_FORMATS,
                        help='the format of the output to generate (default: text)')
    parser.add_argument('--verbose', action='store_true', help='Enable verbose output')
    parser.add_argument('--quiet', action='store_true', help='Only report errors')
    parser.add_argument('--config', help='Update the config file with a JSON string')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # ── kms ────────────────────────────────────────────────────────────
    kms_parser = subparsers.add_parser(
        'kms',
        help='create, list and delete kms keys',
        description='Manage the kms keys and aliases within the region.',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=KMS_EXAMPLES,
    )
    kms_actions = kms_parser.add_subparsers(dest='action')
    kms_actions.add_parser('list', aliases=['ls'], help='list the kms keys within the region')
    kms_create = kms_actions.add_parser('create', help='create a kms key in the region')
    kms_create.add_argument('-n', '--name', help='the name of the kms key you wish to create')
    kms_create.add_argument('-d', '--description',
                            help='the description of the kms key you wish to create')
    kms_delete = kms_actions.add_parser('delete', aliases=['rm'], help='delete a kms key')
    kms_delete.add_argument('-n', '--name', help='the name of the kms key you wish to delete')
    kms_delete.add_argument('--no-schedule-deletion', dest='schedule_deletion',
                            action='store_false',
                            help='only remove the alias, do not schedule the key for deletion')

    # ── buckets ────────────────────────────────────────────────────────
    buckets_parser = subparsers.add_parser(
        'buckets',
        help='list, create and delete buckets',
        description='Manage the buckets within the region.',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=BUCKETS_EXAMPLES,
    )
    bucket_actions = buckets_parser.add_subparsers(dest='action')
    bucket_actions.add_parser('list', aliases=['ls'], help='list the buckets within the region')
    bucket_create = bucket_actions.add_parser('create', help='create a bucket in the region')
    bucket_create.add_argument('-n', '--name', help='the name of the bucket you wish to create')
    bucket_delete = bucket_actions.add_parser('delete', aliases=['rm'], help='delete a bucket')
    bucket_delete.add_argument('-n', '--name', help='the name of the bucket you wish to delete')
    bucket_delete.add_argument('--force', action='store_true',
                               help='delete the bucket regardless if empty or not')

    # ── list ───────────────────────────────────────────────────────────
    list_parser = subparsers.add_parser(
        'list', aliases=['ls'],
        help='provide a listing of the files in the bucket',
        description='List the files held in the bucket under each path.',
    )
    list_parser.add_argument('-b', '--bucket',
                             help='the name of the s3 bucket containing the encrypted files')
    list_parser.add_argument('-l', '--long', action='store_true',
                             help='provide a detailed / long listing of the files')
    list_parser.add_argument('-r', '--recursive', dest='recursive', action='store_true',
                             default=True,
                             help='traverse all subdirectories (default)')
    list_parser.add_argument('--no-recursive', dest='recursive', action='store_false',
                             help='only list the files directly under each path')
    list_parser.add_argument('-f', '--filter', default='.*',
                             help='only list files whose key matches the regex')
    list_parser.add_argument('paths', nargs='*', help='paths within the bucket')

    # ── get ────────────────────────────────────────────────────────────
    get_parser = subparsers.add_parser(
        'get',
        help='retrieve one or more files from the bucket',
        description='Download and decrypt files from the bucket.',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=GET_EXAMPLES,
    )
    get_parser.add_argument('-b', '--bucket',
                            help='the name of the s3 bucket containing the encrypted files')
    get_parser.add_argument('-d', '--output-dir', dest='output_dir',
                            help='the path to the directory in which to save the files')
    get_parser.add_argument('-p', '--perms', default='0744',
                            help='the file permissions on any newly created files (default: 0744)')
    get_parser.add_argument('-r', '--recursive', action='store_true',
                            help='traverse all subdirectories')
    get_parser.add_argument('--flatten', action='store_true',
                            help='do not maintain the directory structure, '
                                 'flatten all files into a single directory')
    get_parser.add_argument('-f', '--filter', default='.*',
                            help='apply the regex filter to the files before retrieving')
    get_parser.add_argument('paths', nargs='*', help='paths within the bucket')

    # ── cat ────────────────────────────────────────────────────────────
    cat_parser = subparsers.add_parser(
        'cat',
        help='display the contents of one or more files',
        description='Write the decrypted content of each file to stdout.',
    )
    cat_parser.add_argument('-b', '--bucket',
                            help='the name of the s3 bucket containing the encrypted files')
    cat_parser.add_argument('paths', nargs='*', help='keys of the files to display')

    # ── put ────────────────────────────────────────────────────────────
    put_parser = subparsers.add_parser(
        'put',
        help='upload one or more files, encrypted, into the bucket',
        description='Upload files encrypted server side with a kms key.',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=PUT_EXAMPLES,
    )
    put_parser.add_argument('-b', '--bucket',
                            help='the name of the s3 bucket to upload into')
    put_parser.add_argument('-k', '--kms', help='the aws kms id to encrypt the files with')
    put_parser.add_argument('--flatten', action='store_true',
                            help='do not maintain the directory structure in the bucket')
    put_parser.add_argument('paths', nargs='*', help='local files or directories')

    # ── edit ───────────────────────────────────────────────────────────
    edit_parser = subparsers.add_parser(
        'edit',
        help='perform an inline edit of a file',
        description='Edit a file from the bucket (or locally) with $EDITOR.',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=EDIT_EXAMPLES,
    )
    edit_parser.add_argument('-b', '--bucket',
                             help='the name of the s3 bucket containing the encrypted files')
    edit_parser.add_argument('-k', '--kms',
                             help='the kms id to re-encrypt with (default: the current key)')
    edit_parser.add_argument('-l', '--local-file', dest='local_file', action='store_true',
                             help='the files are stored locally rather than in the bucket')
    edit_parser.add_argument('paths', nargs='*', help='keys of the files to edit')

    return parser


# ── Bootstrap Helper ───────────────────────────────────────────────────────

GLOBAL_OVERRIDES = ('region', 'profile', 'credentials', 'access_key',
                    'secret_key', 'session_token', 'format')


def resolve_config(args, environ=None):
    """Merge command line flags over the loaded configuration.

    Args:
        args: Parsed argparse namespace
        environ: Optional environment mapping (defaults to ``os.environ``)

    Returns:
        Effective configuration dictionary
    """
    config = ConfigLoader.load_config(environ)
    for key in GLOBAL_OVERRIDES:
        value = getattr(args, key, None)
        if value is not None:
            config[key] = value
    return config


def _resolve_handler(args):
    """Map the parsed command onto its handler class."""
    from .modes.kms_handler import KmsListHandler, KmsCreateHandler, KmsDeleteHandler
    from .modes.buckets_handler import (
        BucketsListHandler, BucketsCreateHandler, BucketsDeleteHandler
    )
    from .modes.list_handler import ListHandler
    from .modes.get_handler import GetHandler
    from .modes.cat_handler import CatHandler
    from .modes.put_handler import PutHandler
    from .modes.edit_handler import EditHandler

    handlers = {
        ('kms', 'list'): KmsListHandler,
        ('kms', 'create'): KmsCreateHandler,
        ('kms', 'delete'): KmsDeleteHandler,
        ('buckets', 'list'): BucketsListHandler,
        ('buckets', 'create'): BucketsCreateHandler,
        ('buckets', 'delete'): BucketsDeleteHandler,
        ('list', None): ListHandler,
        ('get', None): GetHandler,
        ('cat', None): CatHandler,
        ('put', None): PutHandler,
        ('edit', None): EditHandler,
    }

    command = COMMAND_ALIASES.get(args.command, args.command)
    action = getattr(args, 'action', None)
    if command in ('kms', 'buckets'):
        action = COMMAND_ALIASES.get(action, action) or 'list'
    return handlers.get((command, action))


# ── Main Entry Point ──────────────────────────────────────────────────────

def main(argv=None, app_factory=KmsCtl):
    """Main CLI entry point.

    Args:
        argv: Argument list (defaults to ``sys.argv[1:]``)
        app_factory: Callable ``(config, output)`` building the application

    Returns:
        Process exit code
    """
    from .utils.logger import setup_logging

    parser = create_argument_parser()
    args = parser.parse_args(argv)

    setup_logging(verbose=args.verbose, quiet=args.quiet)

    # Handle --config (no AWS access needed)
    if args.config:
        return handle_config_update(args.config)

    if args.command is None:
        parser.print_help()
        return 1

    handler_class = _resolve_handler(args)
    if handler_class is None:
        parser.print_help()
        return 1

    try:
        config = resolve_config(args)
        output = OutputFormatter(config.get('format') or 'text')
        app = app_factory(config, output)
        return handler_class(app, args).execute()
    except KmsctlError as e:
        print_error(f"operation failed, error: {e}")
        return 1


if __name__ == '__main__':
    sys.exit(main())
