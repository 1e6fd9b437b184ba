"""The Command Line Interface for capiblob, including Interactive elements.

Converts keys between PEM and CryptoAPI PUBLICKEYBLOB files and encrypts or decrypts messages in the CryptoAPI block
layout. Any argument left out on the command line is asked for interactively, unless non-interactive mode is on.

Typical usage example:

    capiblob export -p server.pub -b server.blob
    OR
    python -m capiblob encrypt -p server.blob --message "Hi there!"
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import argparse
import base64
import logging
import pathlib
import sys
import typing

import capiblob

logger = logging.getLogger("capiblob")


class HelpData(typing.NamedTuple):
    description: str
    format: typing.Type = str
    choices: list[str] | None = None
    default: typing.Any = None
    advanced: bool = False


help_dict: dict[str, HelpData] = {
    "subcommand":
        HelpData(
            description="The available subcommands in capiblob.",
            choices=["export", "import", "encrypt", "decrypt", "inspect"],
        ),
    "export":
        HelpData("Convert a PEM public key to a PUBLICKEYBLOB."),
    "import":
        HelpData("Convert a PUBLICKEYBLOB to a PEM public key."),
    "encrypt":
        HelpData("Encrypt a message for a CryptoAPI peer."),
    "decrypt":
        HelpData("Decrypt a message from a CryptoAPI peer."),
    "inspect":
        HelpData("Show the fields of a PUBLICKEYBLOB."),
    "public_key":
        HelpData(
            description="Location of the PKCS1 PEM public key file.",
            format=pathlib.Path,
        ),
    "private_key":
        HelpData(
            description="Location of the PKCS8 PEM private key file.",
            format=pathlib.Path,
        ),
    "blob":
        HelpData(
            description="Location of the PUBLICKEYBLOB file.",
            format=pathlib.Path,
        ),
    "key_format":
        HelpData(
            description="Format of the public key used for encryption.",
            choices=["blob", "pem"],
            advanced=True,
            default="blob",
        ),
    "message":
        HelpData(
            description="Message or path to file containing payload. If Path start with `P:`",
            format=str,
        ),
    "encoding":
        HelpData(description="Payload encoding.", choices=["utf-8", "utf-16", "ascii"], advanced=True, default="utf-8"),
    "overwrite":
        HelpData(
            description="Overwrite specified destination files if they exist?",
            choices=["Y", "N"],
            default="N",
        )
}

needs = {
    "export": ("public_key", "blob"),
    "import": ("blob", "public_key"),
    "encrypt": ("public_key", "key_format", "message", "encoding"),
    "decrypt": ("private_key", "message", "encoding"),
    "inspect": ("blob",),
}

pubkey = argparse.ArgumentParser(add_help=False)
pubkey.add_argument("--public_key", "-p", type=help_dict["public_key"].format, help=help_dict["public_key"].description)
privkey = argparse.ArgumentParser(add_help=False)
privkey.add_argument("--private_key",
                     "-P",
                     type=help_dict["private_key"].format,
                     help=help_dict["private_key"].description)
blobfile = argparse.ArgumentParser(add_help=False)
blobfile.add_argument("--blob", "-b", type=help_dict["blob"].format, help=help_dict["blob"].description)
payloads = argparse.ArgumentParser(add_help=False)
payloads.add_argument("--message", type=help_dict["message"].format, help=help_dict["message"].description)
encp = argparse.ArgumentParser(add_help=False)
encp.add_argument("--encoding", "-e", choices=help_dict["encoding"].choices, help=help_dict["encoding"].description)
overwrite = argparse.ArgumentParser(add_help=False)
overwrite.add_argument("--overwrite", "-o", action="store_const", const="Y", help=help_dict["overwrite"].description)
corep = argparse.ArgumentParser(prog="capiblob")
corep.add_argument("--version", "-v", action="version", version=f"%(prog)s {capiblob.__version__}")
corep.add_argument("--non-interactive", "-n", action="store_true", help="Enable non-interactive mode")
corep.add_argument("--advanced", "-a", action="store_true", help="Enable advanced mode, for interactive mode")
corep.add_argument("--verbose", action="store_true", help="Log codec and cipher details to stderr")
commands = corep.add_subparsers(dest="subcommand", title="Subcommands")

commands.add_parser("export", parents=[pubkey, blobfile, overwrite], help=help_dict["export"].description)
commands.add_parser("import", parents=[blobfile, pubkey, overwrite], help=help_dict["import"].description)
encrypt = commands.add_parser("encrypt", parents=[pubkey, payloads, encp], help=help_dict["encrypt"].description)
encrypt.add_argument("--key-format",
                     "-k",
                     choices=help_dict["key_format"].choices,
                     help=help_dict["key_format"].description)
commands.add_parser("decrypt", parents=[privkey, payloads, encp], help=help_dict["decrypt"].description)
commands.add_parser("inspect", parents=[blobfile], help=help_dict["inspect"].description)


def prompt(arg: str, mode: tuple[bool, bool], prntr: typing.Callable = print):
    """Resolve a missing argument from its default or by asking the user.

    Args:
        arg: Name of the argument in `help_dict`.
        mode: (non-interactive, advanced) flags.
        prntr: Output function for the prompt text.

    Returns:
        The chosen value, converted to the argument's format.

    Raises:
        IOError: If the argument has no default and non-interactive mode is active.
    """
    helper_data = help_dict[arg]
    if (mode[0] or (helper_data.advanced and not mode[1])) and helper_data.default is not None:
        return helper_data.default
    if mode[0]:
        raise IOError(f"Argument {arg} is missing and non-interactive mode is active.")
    prntr(f"Please specify the {arg}!")
    prntr("Description: " + helper_data.description)
    for choice in helper_data.choices or ():
        defstring = " (Default)" if choice == helper_data.default else ""
        extra = f" - {help_dict[choice].description}" if arg == "subcommand" else ""
        prntr(f"{choice}{extra}{defstring}")
    if helper_data.default is not None:
        prntr("To accept default just click enter. Otherwise specify value.")
    while True:
        ch = input(f"{arg}: ")
        if not ch and helper_data.default is not None:
            return helper_data.default
        if helper_data.choices is not None:
            if ch in helper_data.choices:
                return ch
            prntr("Please select an option from the list.")
            continue
        if not ch:
            prntr("Please provide a value.")
            continue
        try:
            return helper_data.format(ch)
        except ValueError:
            prntr(f"We could not convert your value to {helper_data.format.__name__}.")


def check_message(mess: str, enc: str) -> str:
    """Parse message for path-notice."""
    if mess.startswith("P:"):
        with open(mess[2:], "r", encoding=enc) as f:
            mess = f.read()
    return mess


def may_write(dest: pathlib.Path, args: argparse.Namespace, pstatus: tuple[bool, bool], pspr: typing.Callable) -> bool:
    """Whether `dest` may be written, asking before overwriting an existing file."""
    if not dest.exists():
        return True
    rs = getattr(args, "overwrite", None)
    if rs is None:
        rs = prompt("overwrite", pstatus, pspr)
    if rs == "N":
        print(f"Destination {dest} already exists!", file=sys.stderr)
        return False
    return True


def run(args: argparse.Namespace, pstatus: tuple[bool, bool], pspr: typing.Callable) -> int:
    """Executes the resolved subcommand, returning the exit status."""
    match args.subcommand:
        case "export":
            key = capiblob.RSAPubKey.import_key(args.public_key)
            if not may_write(args.blob, args, pstatus, pspr):
                return 1
            capiblob.write_blob(args.blob, key)
            pspr(f"\nWrote {key.bits}-bit PUBLICKEYBLOB to {args.blob}")
        case "import":
            key = capiblob.read_blob(args.blob)
            if not may_write(args.public_key, args, pstatus, pspr):
                return 1
            key.export(args.public_key)
            pspr(f"\nWrote {key.bits}-bit public key to {args.public_key}")
        case "encrypt":
            args.message = check_message(args.message, args.encoding)
            if args.key_format == "blob":
                key = capiblob.read_blob(args.public_key)
            else:
                key = capiblob.RSAPubKey.import_key(args.public_key)
            ciph = capiblob.encrypt_blocks(capiblob.PKCS1v15Engine(key), args.message.encode(args.encoding))
            pspr("Ciphertext:")
            print(base64.b64encode(ciph).decode("ascii"))
        case "decrypt":
            args.message = check_message(args.message, "ascii")
            key = capiblob.RSAPrivKey.import_key(args.private_key)
            clear = capiblob.decrypt_blocks(capiblob.PKCS1v15Engine(key, encrypt=False),
                                            base64.b64decode(args.message.strip()))
            pspr("Cleartext:")
            print(clear.decode(args.encoding))
        case "inspect":
            key = capiblob.read_blob(args.blob)
            print(f"Bit length: {key.bits}")
            print(f"Exponent: {key.expo} ({key.expo:#x})")
            print(f"Modulus: {key.mod:x}")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Core Hybrid CLI/ICLI (Command Line Interface/Interactive Command Line Interface)"""
    args = corep.parse_args(argv)
    pstatus = (args.non_interactive, args.advanced)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")

    def pspr(text: str):
        """Print only if not in non-interactive mode."""
        if not pstatus[0]:
            print(text)

    pspr("Welcome to capiblob!\n")
    try:
        if not args.subcommand:
            args.subcommand = prompt("subcommand", pstatus, pspr)
        for reqs in needs[args.subcommand]:
            if getattr(args, reqs, None) is None:
                setattr(args, reqs, prompt(reqs, pstatus, pspr))
            else:
                pspr(f"{reqs}: {getattr(args, reqs)}")
        pspr("\nInput Complete! Executing...")
        status = run(args, pstatus, pspr)
    except (capiblob.CapiBlobError, IOError, ValueError) as exc:
        logger.debug("Command %s failed", args.subcommand, exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    pspr("Goodbye!")
    return status


if __name__ == "__main__":
    sys.exit(main())
