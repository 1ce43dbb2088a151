"""
httpc - send one HTTP request from the command line.

Builds a single request from command-line arguments with the httpc request
builder, sends it and prints the decoded body or saves it to a file.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import List, Optional

from internal.config.manager import ConfigManager
from lib.httpc import Cookie, EncodingMode, HttpcError, HttpClient, Request
from lib.logging_utils import initLogging
from lib.utils import jsonDumps, parseKeyValue

# Configure basic logging first
logging.basicConfig(format="%(asctime)s - %(name)s - %(levelname)s - %(message)s", level=logging.WARNING)
logger = logging.getLogger(__name__)


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="httpc - send one HTTP request and print or save the response body")
    parser.add_argument("url", nargs="?", help="Target URL")
    parser.add_argument(
        "-c",
        "--config",
        default="config.toml",
        help="Path to configuration file (default: config.toml)",
    )
    parser.add_argument(
        "--config-dir",
        action="append",
        help="Directory to search for .toml config files recursively (can be specified multiple times)",
    )
    parser.add_argument(
        "--print-config",
        action="store_true",
        help="Pretty-print loaded configuration and exit",
    )
    parser.add_argument("-X", "--method", default="GET", help="HTTP method (default: GET)")
    parser.add_argument("-H", "--header", action="append", default=[], help="Header 'Name: value' (repeatable)")
    parser.add_argument("-b", "--cookie", action="append", default=[], help="Cookie name=value (repeatable)")
    parser.add_argument("-d", "--data", action="append", default=[], help="Form field name=value (repeatable)")
    parser.add_argument("--json", dest="jsonData", help="Raw JSON body, sent as is")
    parser.add_argument(
        "-F",
        "--form",
        action="append",
        default=[],
        help="Multipart field name=value or name=@path for a file (repeatable)",
    )
    parser.add_argument("-o", "--output", help="Save the body under this path prefix instead of printing it")
    parser.add_argument("--output-name", default="", help="File name appended to --output (default: from URL)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log the request before it is sent")

    args = parser.parse_args(argv)
    if not args.print_config and not args.url:
        parser.error("the following arguments are required: url")
    if args.jsonData is not None and args.form:
        parser.error("--json and -F/--form are mutually exclusive")
    return args


def buildRequest(client: HttpClient, args: argparse.Namespace) -> tuple[Request, EncodingMode]:
    """Translate parsed arguments into a request and its body encoding mode.

    Raises:
        ValueError: If a header, cookie or field argument is malformed
    """
    request = client.newRequest().setMethod(args.method).setUrl(args.url)
    if args.verbose:
        request.setVerbose(True)

    for header in args.header:
        request.setHeader(*parseKeyValue(header, ":"))

    if args.cookie:
        request.setCookies([Cookie(*parseKeyValue(cookie)) for cookie in args.cookie])

    for item in args.data:
        request.setData(*parseKeyValue(item))

    if args.jsonData is not None:
        request.setJsonData(args.jsonData)
        return request, EncodingMode.JSON

    if args.form:
        for item in args.form:
            name, value = parseKeyValue(item)
            if value.startswith("@"):
                request.setFileData(name, value[1:], True)
            else:
                request.setFileData(name, value, False)
        return request, EncodingMode.MULTIPART

    return request, EncodingMode.URL_ENCODED


def prettyPrintConfig(configManager: ConfigManager) -> None:
    """Pretty-print the loaded configuration."""
    print("=== httpc Configuration ===")
    print()
    print(jsonDumps(configManager.config, indent=2))
    print()
    print("=== Configuration loaded successfully ===")


def run(args: argparse.Namespace, configManager: ConfigManager) -> int:
    """Send the request described by ``args``, return the exit status."""
    requestDefaults = configManager.getRequestDefaults()
    if requestDefaults.get("verbose", False):
        args.verbose = True
    savePath = args.output if args.output is not None else requestDefaults.get("save-path")

    with HttpClient.fromConfig(configManager.getHttpConfig()) as client:
        try:
            request, mode = buildRequest(client, args)
        except ValueError as e:
            logger.error(f"Invalid argument: {e}")
            return 1

        request.send(mode)
        try:
            if savePath is not None:
                response = request.endFile(savePath, args.output_name)
                logger.info(f"Saved {response.url} ({response.status_code})")
            else:
                _, body = request.end()
                print(body)
        except HttpcError as e:
            logger.error(f"{args.method.upper()} {args.url} failed: {type(e).__name__}: {e}")
            return 1

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_arguments(argv)
    if args.config_dir:
        args.config_dir = [os.path.abspath(dir_path) for dir_path in args.config_dir]

    # The default config.toml is optional, an explicitly given one is not
    configRequired = args.config != "config.toml" or bool(args.config_dir)
    configManager = ConfigManager(args.config, args.config_dir, required=configRequired)

    initLogging(configManager.getLoggingConfig())

    if args.print_config:
        prettyPrintConfig(configManager)
        return 0

    return run(args, configManager)


if __name__ == "__main__":
    sys.exit(main())
