"""

Command line utility to convert Avro schema files into TypeScript interfaces.

"""

import argparse
import logging
import sys

from avrotsify import _version
from avrotsify.avrotots import convert_avro_to_typescript
from avrotsify.common import MIN_DOC_WIDTH, check_doc_width

EXAMPLES = """examples:
  avrotsify example/standard_cap-value.avsc
  avrotsify example/standard_cap-value.avsc -o output
  avrotsify -v example/
  avrotsify -i avro-files/ -c avro.ts
"""


def doc_width_type(value: str) -> int:
    """Parse the --doc-width argument."""
    try:
        return check_doc_width(int(value))
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog='avrotsify',
        description='Infer TypeScript interfaces from Avro schemas.',
        epilog=EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument('input', nargs='*', help='Input file or folder. If folder, reads all *.avsc files.')
    parser.add_argument('-i', '--input', dest='inputs', action='append', default=[],
                        help='Input file or folder (may be repeated).')
    parser.add_argument('-o', '--out-folder', dest='out_folder',
                        help='Location where you want to save the output files. If not supplied, use the input folder.')
    parser.add_argument('-c', '--concat',
                        help='Concat all files and remove duplicated type definitions. Stores to the specified location. Ignores --out-folder.')
    parser.add_argument('-v', '--verbose', action='store_true', help='Turn verbose output on.')
    parser.add_argument('--strict', action='store_true',
                        help='Fail a schema containing a type that cannot be translated instead of emitting unknown.')
    parser.add_argument('--doc-width', dest='doc_width', type=doc_width_type, default=80,
                        help=f'Maximum width of generated documentation comments (at least {MIN_DOC_WIDTH}).')
    parser.add_argument('--version', action='store_true', help='Print the version of avrotsify.')
    return parser


def main(argv=None):
    """Main function for the command line utility."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(f'avrotsify {_version.version}')
        return 0

    input_paths = args.input + args.inputs
    if not input_paths:
        parser.print_help()
        return 0

    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING,
                        format='%(levelname)s: %(message)s')

    try:
        result = convert_avro_to_typescript(input_paths, args.out_folder, args.concat,
                                            strict=args.strict, doc_width=args.doc_width,
                                            verbose=args.verbose)
    except OSError as e:
        print("Error: ", str(e))
        return 1

    for failure in result.failures:
        print(f"Error: {failure}")
    for diagnostic in result.diagnostics:
        print(f"Warning: {diagnostic.document}: {diagnostic.message}: {diagnostic.offending_node}")
    print('done')
    return 0 if result.succeeded else 1


if __name__ == "__main__":
    sys.exit(main())
