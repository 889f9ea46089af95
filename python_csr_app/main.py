#!/usr/bin/env python3
"""
Sparse Matrix CSR Operations - Console Version
Adds, subtracts and multiplies sparse integer matrices stored in text files.
"""
import sys
import argparse
import os
import time
from datetime import datetime

# Make the sibling modules importable when run as a script
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from enums import Operation, DuplicatePolicy
from exceptions import FormatError, DimensionMismatch
from generator import Generator
from matrix_io import load_matrix, save_matrix
from results import OperationResult, MatrixSummary
from settings import Settings


# Errors reported to the user without a traceback
USER_ERRORS = (FormatError, DimensionMismatch, IndexError, OverflowError, OSError)
CLI_ERRORS = USER_ERRORS + (ValueError, TypeError)

MENU_CHOICES = {
    '1': Operation.ADD,
    '2': Operation.SUBTRACT,
    '3': Operation.MULTIPLY,
}


def apply_operation(operation, left, right):
    """Run one arithmetic operation on two loaded matrices."""
    if operation == Operation.ADD:
        return left.add(right)
    if operation == Operation.SUBTRACT:
        return left.subtract(right)
    if operation == Operation.MULTIPLY:
        return left.multiply(right)
    raise ValueError(f"Unknown operation: {operation}")


def ensure_output_dir(settings):
    """Create the output directory if needed and return its absolute path."""
    output_dir = os.path.abspath(settings.get_output_dir())
    os.makedirs(output_dir, exist_ok=True)
    return output_dir


def output_file_path(output_dir, file_name):
    """Join a bare file name onto the output directory."""
    if not file_name or os.path.basename(file_name) != file_name or file_name in (os.curdir, os.pardir):
        raise ValueError(f"Output file name must not contain a path: '{file_name}'")
    return os.path.join(output_dir, file_name)


def run_operation(operation, left_path, right_path, output_path, settings):
    """Load both operands, compute, write the result file.

    Returns:
        tuple: (OperationResult, left, right, result)
    """
    start_time = time.time()

    left = load_matrix(left_path, settings)
    right = load_matrix(right_path, settings)
    result = apply_operation(operation, left, right)
    output_path = save_matrix(result, output_path)

    elapsed = time.time() - start_time

    op_result = OperationResult(
        operation=operation.value,
        left=MatrixSummary.from_matrix(left, os.path.abspath(left_path)),
        right=MatrixSummary.from_matrix(right, os.path.abspath(right_path)),
        result=MatrixSummary.from_matrix(result, output_path),
        wall_clock_seconds=elapsed,
        timestamp=datetime.now().isoformat(timespec='seconds'),
        output_path=output_path,
    )
    return op_result, left, right, result


def print_result(op_result):
    print(f"Left:   {op_result.left.rows}x{op_result.left.cols}, nnz={op_result.left.nnz}")
    print(f"Right:  {op_result.right.rows}x{op_result.right.cols}, nnz={op_result.right.nnz}")
    print(f"Result: {op_result.result.rows}x{op_result.result.cols}, nnz={op_result.result.nnz}")
    print(f"Result saved to {op_result.output_path}")
    print(f"Time: {op_result.wall_clock_seconds:.3f} sec")


def get_valid_file_path(prompt_text, input_func=input):
    """Ask until the answer names an existing file."""
    while True:
        file_path = input_func(prompt_text).strip()
        absolute_path = os.path.abspath(file_path)

        if not file_path or not os.path.isfile(absolute_path):
            print(f"File not found: {absolute_path}")
            print("Please provide a valid path (absolute or relative to the current directory)")
            continue

        return absolute_path


def run_interactive(settings, input_func=input):
    """Menu loop. Errors are reported and the menu is shown again."""
    try:
        output_dir = ensure_output_dir(settings)
    except OSError as e:
        print(f"Error: cannot create output directory: {e}")
        return

    while True:
        print("\nMenu:")
        print("1. Add matrices")
        print("2. Subtract matrices")
        print("3. Multiply matrices")
        print("4. Exit")

        try:
            choice = input_func("Enter your choice (1-4): ").strip()
        except EOFError:
            print()
            choice = '4'

        if choice == '4':
            print("Exiting program.")
            return

        operation = MENU_CHOICES.get(choice)
        if operation is None:
            print("Invalid choice. Please enter 1-4.")
            continue

        try:
            print("\nFirst matrix:")
            left_path = get_valid_file_path("Enter path to first matrix file: ", input_func)

            print("\nSecond matrix:")
            right_path = get_valid_file_path("Enter path to second matrix file: ", input_func)

            output_name = input_func("\nEnter output file name (without path): ").strip()
            if not output_name:
                print("Output file name cannot be empty")
                continue

            print("Processing...")
            op_result, _left, _right, _result = run_operation(
                operation, left_path, right_path,
                output_file_path(output_dir, output_name), settings
            )
            print_result(op_result)
        except EOFError:
            print("\nExiting program.")
            return
        except CLI_ERRORS as e:
            print(f"Error: {e}")


def build_parser():
    parser = argparse.ArgumentParser(
        description='Sparse Matrix CSR Operations - add, subtract and multiply sparse integer matrices',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py --operation add --left a.txt --right b.txt --output sum.txt
  python main.py --operation multiply -l a.txt -r b.txt -o product.txt --output-json run.json
  python main.py --generate 1000 1000 --density 0.001 --seed 7 --output random.txt
  python main.py --interactive
        """
    )

    mode = parser.add_mutually_exclusive_group(required=True)
    mode.add_argument('--operation', '-op', type=str, choices=[op.value for op in Operation],
                      help='Operation to run on --left and --right')
    mode.add_argument('--interactive', '-I', action='store_true',
                      help='Start the interactive menu')
    mode.add_argument('--generate', type=int, nargs=2, metavar=('ROWS', 'COLS'),
                      help='Write a random sparse matrix of the given shape')

    parser.add_argument('--left', '-l', type=str, default=None,
                        help='Path to the first matrix file')
    parser.add_argument('--right', '-r', type=str, default=None,
                        help='Path to the second matrix file')
    parser.add_argument('--output', '-o', type=str, default=None,
                        help='Output file name (no directories), placed inside the output directory')
    parser.add_argument('--output-dir', type=str, default=None,
                        help='Output directory (default: outputs, or $CSR_OUTPUT_DIR)')
    parser.add_argument('--strict-duplicates', action='store_true',
                        help='Reject input files that give the same cell twice')

    # Generator flags
    parser.add_argument('--density', type=float, default=0.01,
                        help='Fraction of non-zero cells for --generate (default: 0.01)')
    parser.add_argument('--seed', type=int, default=None,
                        help='Random seed for --generate')
    parser.add_argument('--max-value', type=int, default=9,
                        help='Largest absolute value for --generate (default: 9)')

    # Export flags
    parser.add_argument('--output-json', type=str, default=None,
                        help='Export the run summary to a JSON file')
    parser.add_argument('--output-csv', type=str, default=None,
                        help='Export the run summary to a CSV file')

    # Visualization flags
    parser.add_argument('--plot-save', type=str, default=None,
                        help='Save sparsity pattern plots to the given directory')

    return parser


def build_settings(args):
    settings = Settings.from_environment()
    if args.output_dir:
        settings.set_output_dir(args.output_dir)
    if args.strict_duplicates:
        settings.set_duplicate_policy(DuplicatePolicy.REJECT)
    return settings


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.operation and not (args.left and args.right and args.output):
        parser.error('--operation requires --left, --right and --output')
    if args.generate and not args.output:
        parser.error('--generate requires --output')

    settings = build_settings(args)

    print("Sparse Matrix-CSR Operations")
    print("=" * 40)
    settings.print()
    print("=" * 40)

    if args.interactive:
        run_interactive(settings)
        return

    start_time = time.time()

    try:
        output_dir = ensure_output_dir(settings)
        output_path = output_file_path(output_dir, args.output)

        if args.generate:
            rows, cols = args.generate
            generator = Generator(seed=args.seed, max_abs_value=args.max_value)
            matrix = generator.generate_sparse_matrix(rows, cols, args.density)
            output_path = save_matrix(matrix, output_path)
            print(f"Generated {rows}x{cols} matrix with {matrix.nnz} non-zero entries")
            print(f"Saved to {output_path}")
            return

        operation = Operation(args.operation)
        print(f"Operation: {operation.value}")
        print(f"First matrix: {args.left}")
        print(f"Second matrix: {args.right}")
        print()

        op_result, left, right, result = run_operation(
            operation, args.left, args.right, output_path, settings
        )
        print_result(op_result)

        # Export results
        if args.output_json:
            op_result.to_json(args.output_json)
            print(f"\nSummary exported to JSON: {args.output_json}")

        if args.output_csv:
            op_result.to_csv(args.output_csv)
            print(f"Summary exported to CSV: {args.output_csv}")

        # Visualization
        if args.plot_save:
            try:
                from visualization import MatrixPlotter
                fig = MatrixPlotter.plot_operation_dashboard(
                    left, right, result, operation.value, save_dir=args.plot_save
                )
                print(f"Plots saved to {args.plot_save}")
                import matplotlib.pyplot as plt
                plt.close(fig)
            except ImportError:
                print("\nWarning: matplotlib is not installed. Install with: pip install matplotlib")

    except CLI_ERRORS as e:
        elapsed_time = time.time() - start_time

        print()
        print("=" * 40)
        print(f"Error: {e}")
        print(f"Time until error: {elapsed_time:.2f} sec")
        print("=" * 40)
        sys.exit(1)


if __name__ == '__main__':
    main()
