import argparse
import logging
import os
import sys

from pgp_verify import __version__
from pgp_verify.errors import KeyNotFound, PGPVerifyError
from pgp_verify.keyring import KeyRing
from pgp_verify.signing import verify_clear, verify_detached

__author__ = "pgp-verify developers"
__copyright__ = "(c) 2026 pgp-verify developers"
__license__ = "MIT"

# Used when --key is not given.
KEYRING_ENV_VAR = "PGP_VERIFY_KEYRING"


class PGPVerifyCLI:
    def __init__(self, args):
        self.logger = logging.getLogger(__name__)
        self.key_ring = None
        self.logger.debug("Parsing args: %s", str(args))
        self.args = self.parse_args(args)
        logformat = "[%(asctime)s] %(levelname)s:%(name)s:%(message)s"
        logging.basicConfig(
            level=self.args.loglevel,
            stream=sys.stdout,
            format=logformat,
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    def run_command(self):
        """
        parse_args() will set self.args.func() to the function we wish to
        execute, based on the subcommand the user ran. These 'action functions'
        will return the integer exit code with which we exit at the very end.

        Roughly:
        0 = signature verified
        1 = error (e.g. file missing, malformed armor or packets, unsupported algorithm)
        2 = no public key matches the signature
        3 = signature verification failed
        """
        return self.args.func()

    def parse_args(self, args):
        """
        Parse command line parameters

        Args:
          args (List[str]): command line parameters as list of strings
              (for example  ``["--help"]``).

        Returns:
          :obj:`argparse.Namespace`: command line parameters namespace
        """

        parser = argparse.ArgumentParser(
            description="Verification of OpenPGP signatures"
        )
        parser.add_argument(
            "--version",
            action="version",
            version="pgp-verify {ver}".format(ver=__version__),
        )
        parser.add_argument(
            "--debug",
            help="Print a bunch of debug info",
            action="store_const",
            dest="loglevel",
            const=logging.DEBUG,
        )
        parser.add_argument(
            "--nocolor",
            help="Disable color output",
            required=False,
            dest="nocolor",
            default=True if len(os.environ.get("NO_COLOR", "")) else False,
            action="store_true",
        )

        commands = parser.add_subparsers(required=True, dest="command")

        # command: detached
        cmd_detached = commands.add_parser(
            "detached",
            help="Verify content against a detached signature",
        )
        cmd_detached.set_defaults(func=self.detached)
        self._add_key_argument(cmd_detached)
        cmd_detached.add_argument(
            "--signature",
            help="The detached signature file, armored or binary",
            required=True,
            metavar="SIGNATURE",
            dest="signature",
        )
        cmd_detached.add_argument(
            "content",
            help="The file the signature was made over",
            metavar="CONTENT",
        )

        # command: clear
        cmd_clear = commands.add_parser(
            "clear",
            help="Verify a clear-signed message and recover its text",
        )
        cmd_clear.set_defaults(func=self.clear)
        self._add_key_argument(cmd_clear)
        cmd_clear.add_argument(
            "--output",
            help=(
                "Where to write the recovered text once verified, '-' for stdout. (default: not written)"
            ),
            required=False,
            metavar="OUTPUT",
            dest="output",
            default=None,
        )
        cmd_clear.add_argument(
            "--encoding",
            help="Text encoding of the signed message. (default: utf-8)",
            required=False,
            metavar="ENCODING",
            dest="encoding",
            default="utf-8",
        )
        cmd_clear.add_argument(
            "message",
            help="The clear-signed message file",
            metavar="MESSAGE",
        )
        return parser.parse_args(args)

    def _add_key_argument(self, parser):
        parser.add_argument(
            "--key",
            help=(
                f"The public key or key ring file, armored or binary. (default: ${KEYRING_ENV_VAR})"
            ),
            required=False,
            metavar="KEYRING",
            dest="key",
            default=os.environ.get(KEYRING_ENV_VAR),
        )

    def _error(self, msg):
        if self.args.nocolor:
            print(f"[ERROR] {msg}")
        else:
            print(f"[\033[91mERROR\033[0m] {msg}")

    def _ok(self, msg):
        if self.args.nocolor:
            print(f"[OK   ] {msg}")
        else:
            print(f"[\033[92mOK   \033[0m] {msg}")

    def _note(self, msg):
        if self.args.nocolor:
            print(f"[NOTE ] {msg}")
        else:
            print(f"[\033[94mNOTE \033[0m] {msg}")

    def _check_files(self, *files):
        """
        Return False (after printing why) if any of the (label, path) pairs
        given does not point at an existing file.
        """
        if self.args.key is None:
            self._error("No public key given.")
            self._note(f"Pass --key or set the {KEYRING_ENV_VAR} environment variable.")
            return False

        for label, path in (("Public key file", self.args.key),) + files:
            if not os.path.isfile(path):
                self._error(f"{label} does not exist: {path}")
                return False
        return True

    def _load_key_ring(self):
        with open(self.args.key, "rb") as f:
            key_ring = KeyRing.build(f)
        self.logger.debug("Loaded %d key(s) from %s", len(key_ring), self.args.key)
        return key_ring

    def _run_verification(self, func):
        """
        Call func() and turn the errors it may raise into exit codes. Returns
        a (result, exit code) tuple, result being None on error.
        """
        try:
            return func(), 0
        except KeyNotFound as e:
            self._error(str(e))
            key_ids = self.key_ring.key_ids if self.key_ring is not None else []
            self._note(f"Public keys available: {', '.join(key_ids) or 'none'}")
            return None, 2
        except PGPVerifyError as e:
            self._error(f"Could not check the signature: {e}")
            if self.args.loglevel != logging.DEBUG:
                self._note(
                    "You can use the --debug global flag to view the full traceback."
                )
            self.logger.debug(e, exc_info=e)
            return None, 1
        except OSError as e:
            self._error(f"Could not read input: {e}")
            return None, 1

    def _report(self, result):
        if result.success is not True:
            self._error(result.summary)
            self._note(f"Checked against key {result.key_id_hex}.")
            self._note("Re-run with the global --debug flag for more information.")
            self.logger.debug(result.extra_information)
            return 3

        self._ok(result.summary)
        self._note(f"Signed by key {result.extra_information['fingerprint']}")
        self.logger.debug(result.extra_information)
        return 0

    def detached(self):
        if not self._check_files(
            ("Signature file", self.args.signature),
            ("Content file", self.args.content),
        ):
            return 1

        def verify():
            key_ring = self.key_ring = self._load_key_ring()
            with open(self.args.content, "rb") as content, open(
                self.args.signature, "rb"
            ) as signature:
                return verify_detached(content, signature, key_ring)

        result, retcode = self._run_verification(verify)
        if result is None:
            return retcode
        return self._report(result)

    def _write_file_or_print(self, dest, contents, encoding):
        if dest == "-":
            print(contents.decode(encoding), end="")
            return

        outdir = os.path.dirname(dest)

        if len(outdir) > 0 and not os.path.isdir(outdir):
            self.logger.info("Creating output directory: %s", outdir)
            os.makedirs(outdir)

        with open(dest, "wb") as f:
            f.write(contents)
            self.logger.info("Wrote to file: %s", dest)

    def clear(self):
        if not self._check_files(("Message file", self.args.message)):
            return 1

        def verify():
            key_ring = self.key_ring = self._load_key_ring()
            with open(self.args.message, "rb") as message:
                result, _ = verify_clear(
                    message, key_ring, encoding=self.args.encoding
                )
            return result

        result, retcode = self._run_verification(verify)
        if result is None:
            return retcode

        retcode = self._report(result)
        if retcode != 0:
            if self.args.output is not None:
                self._note(
                    "Recovered text was not written as the signature did not verify."
                )
            return retcode

        if self.args.output is not None:
            self._write_file_or_print(
                self.args.output, result.plaintext, result.encoding
            )
        return 0


def main(args):
    cli = PGPVerifyCLI(args)
    cli.logger.debug("Running requested command/passing to function")
    exitcode = cli.run_command()
    cli.logger.info("Script ends here, rc=%d", exitcode)
    return exitcode


def run():
    """Calls :func:`main` passing the CLI arguments extracted from :obj:`sys.argv`

    This function can be used as entry point to create console scripts with setuptools.
    """
    return main(sys.argv[1:])


if __name__ == "__main__":
    run()
