#!/usr/bin/env python3
"""
Piet Programming Language Interpreter

Runs a Piet program image (PNG, GIF, ...) until it halts and prints what it
wrote.

Examples:
    # Run a program
    python3 piet_interpreter.py hello.png

    # Program drawn with 10x10 pixel codels, feeding it input
    python3 piet_interpreter.py -c 10 -i "42" adder.png

    # Trace every step and dump the final stack
    python3 piet_interpreter.py -v --stack hello.png
"""

import argparse
import logging
import sys
from typing import Optional

import numpy as np
from PIL import Image

from pietcore import ExecutionFault, Grid, Interpreter, PietError


DEFAULT_MAX_STEPS = 200000


# Image loading

def load_image(path: str, codel_size: int = 1) -> Image.Image:
    """Load image as RGB, shrinking codels to single pixels."""
    try:
        img = Image.open(path).convert('RGB')
    except FileNotFoundError:
        raise FileNotFoundError(f"Image file not found: {path}") from None
    except OSError as e:
        raise ValueError(f"Failed to open image: {e}") from e

    if codel_size > 1:
        w, h = img.size
        if w % codel_size or h % codel_size:
            raise ValueError(f"Image {w}x{h} is not a multiple of codel size {codel_size}")
        img = img.resize((w // codel_size, h // codel_size), Image.NEAREST)

    return img


def load_grid(path: str, codel_size: int = 1) -> Grid:
    return Grid.from_array(np.array(load_image(path, codel_size)))


# Execution

def run_program(interpreter: Interpreter, max_steps: Optional[int]) -> bool:
    """Run until termination; False if the step limit was hit first."""
    interpreter.run(max_steps)
    return interpreter.terminated


def main():
    parser = argparse.ArgumentParser(
        description='Piet esoteric language interpreter',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )
    parser.add_argument('image', help='Piet program image')
    parser.add_argument('-i', '--input',
                        help='Text read by in(char)/in(number)')
    parser.add_argument('--input-file',
                        help='File read by in(char)/in(number)')
    parser.add_argument('-n', '--max-steps', type=int, default=DEFAULT_MAX_STEPS,
                        help=f'Step limit, 0 for none (default: {DEFAULT_MAX_STEPS})')
    parser.add_argument('-c', '--codel-size', type=int, default=1,
                        help='Pixels per codel edge (default: 1)')
    parser.add_argument('--stack', action='store_true',
                        help='Print final stack to stderr')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Trace every step to stderr')

    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, stream=sys.stderr,
                            format='%(levelname)s %(name)s: %(message)s')

    if args.codel_size < 1:
        print("Error: codel size must be at least 1", file=sys.stderr)
        return 1

    if args.max_steps < 0:
        print("Error: max steps must be 0 or more", file=sys.stderr)
        return 1

    input_text = args.input
    if args.input_file:
        try:
            with open(args.input_file, 'r', encoding='utf-8') as f:
                input_text = (input_text or '') + f.read()
        except OSError as e:
            print(f"Error reading input file: {e}", file=sys.stderr)
            return 1

    try:
        grid = load_grid(args.image, args.codel_size)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    interpreter = Interpreter(grid, input_text)
    status = 0

    try:
        if not run_program(interpreter, args.max_steps or None):
            print(f"\n[Step limit of {args.max_steps} reached]", file=sys.stderr)
            status = 2
    except KeyboardInterrupt:
        print("\n[Interrupted by user]", file=sys.stderr)
        status = 130
    except ExecutionFault as e:
        print(f"\n[Runtime error at {tuple(interpreter.position)}: {e}]", file=sys.stderr)
        status = 1
    except PietError as e:
        print(f"\n[Interpreter error: {e}]", file=sys.stderr)
        status = 1

    sys.stdout.write(interpreter.output)
    print()  # Final newline

    if args.stack:
        print(interpreter.format_stack(), end='', file=sys.stderr)

    return status


if __name__ == "__main__":
    sys.exit(main())
