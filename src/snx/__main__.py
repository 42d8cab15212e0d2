## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘
#
# snx — A line-oriented scripting language with jumps, blocks and parameterized functions.
#

import re
import sys
import time
from dataclasses import dataclass

import click

from .types import Error
from .errors import SnxError, SnxRuntimeError
from .grammar import STYLES
from .listing import Listing
from .interpreter import Interpreter
from .runtime import Runtime
from .formatting import write_without_ansi, format_value, format_banner, format_source_context


@dataclass(frozen=True)
class RuntimeConfig:
    verbose: int
    style: str
    allow_exec: bool
    stats: bool
    plain: bool


def _refuse_shell(command: str) -> int:
    raise SnxRuntimeError(f"Shell execution is disabled; refused to run `{command}`.")


class SnxRunner:
    def __init__(self, config: RuntimeConfig):
        self.verbose = config.verbose
        self.stats_enabled = config.stats
        self.plain = config.plain

        if self.plain:
            writer = write_without_ansi(sys.stdout.write)
            sys.stdout.write, sys.stderr.write = writer, writer

        self.runtime = Runtime(style=config.style, shell=None if config.allow_exec else _refuse_shell)
        self.total_stats = {'steps': 0, 'errors': 0, 'start': time.time()} if self.stats_enabled else None
        self.failure = False

    def _fatal_error(self, exc: SnxError, listing: Listing | None, is_repl: bool = False) -> None:
        print(f"{format_banner('FATAL ' + exc.kind.upper() + ' ERROR.')} Line {exc.line}: {exc.message}", file=sys.stderr)
        if listing is not None and exc.line is not None and 1 <= exc.line <= len(listing):
            print(format_source_context(listing.lines, exc.line, listing.filename), file=sys.stderr)
        if not is_repl: self.failure = True

    def execute_script(self, source: str, filename: str) -> None:
        listing = Listing.from_source(source, filename=filename)
        try:
            interp = self.runtime.run(listing, verbosity=self.verbose, stats=self.total_stats)
        except SnxError as exc:
            self._fatal_error(exc, listing)
            return
        if interp.halted and self.verbose > 0:
            print("\nProgram execution terminated by END command.")

    def evaluate_expression(self, expression: str) -> None:
        value = self.runtime.evaluate(expression)
        if isinstance(value, Error):
            print(f"{format_banner('EVALUATION ERROR.')} {value.message}", file=sys.stderr)
            self.failure = True
        else:
            print(format_value(value))

    def _is_complete(self, interp: Interpreter, buffer: list[str]) -> bool:
        depth = sum(delta for line in buffer for delta in interp.grammar.block_events(line))
        return depth <= 0

    def repl(self) -> None:
        if sys.platform != "win32": import readline

        print('snx - Line-oriented scripting REPL; type Ctrl+C to exit.')
        interp = self.runtime.interpreter(Listing([], filename='<REPL>'), verbosity=self.verbose)
        buffer: list[str] = []

        while not interp.halted:
            try:
                prompt = "\033[36m<<< \033[0m" if not buffer else "\033[36m... \033[0m"
                line = input(prompt)
                if not buffer and line.strip() in ('quit', 'exit'): break
                if not buffer and line.strip() and interp.grammar.classify(line) is None:
                    print("\033[90m>>>\033[0m", format_value(interp.evaluate(line)))
                    continue

                buffer.append(line)
                if not self._is_complete(interp, buffer): continue
                interp.listing.extend(buffer)
                buffer = []
                try:
                    interp.run()
                except SnxError as exc:
                    self._fatal_error(exc, interp.listing, is_repl=True)
                    interp.pc = interp.listing.end

            except (KeyboardInterrupt, EOFError):
                print(""); break

    def finalize(self) -> int:
        if self.total_stats:
            elapsed_time = time.time() - self.total_stats['start']
            print(f"\n\033[97m\033[48;5;30m STATISTICS. \033[0m")
            print(f"step\t\033[97m{self.total_stats['steps']:,}\033[0m")
            print(f"errors\t\033[97m{self.total_stats['errors']:,}\033[0m")
            print(f"time\t\033[97m{elapsed_time:.3f}s\033[0m")
        return 1 if self.failure else 0


@click.group(invoke_without_command=True)
@click.option('--verbose', '-v', default=0, count=True, help='Trace each executed line; twice to include scope and call depth.')
@click.option('--style', default='end', type=click.Choice(STYLES), help='Block style in effect until a STYLE directive.')
@click.option('--no-exec', 'no_exec', is_flag=True, help='Refuse to run shell commands from `exec` statements.')
@click.option('--stats', is_flag=True, help='Display execution statistics (e.g., number of steps).')
@click.option('--plain', '-p', is_flag=True, help='Strip ANSI color codes and redirect stderr to stdout.')
@click.pass_context
def cli(ctx: click.Context, verbose: int, style: str, no_exec: bool, stats: bool, plain: bool) -> None:
    ctx.ensure_object(dict)
    ctx.obj['config'] = RuntimeConfig(verbose=verbose, style=style, allow_exec=not no_exec, stats=stats, plain=plain)


@cli.command('run-file')
@click.argument('script', type=click.File('r', encoding='utf-8'))
@click.pass_context
def run_file(ctx: click.Context, script) -> None:
    runner = SnxRunner(ctx.obj['config'])
    runner.execute_script(script.read(), script.name or '<STDIN>')
    ctx.exit(runner.finalize())


@cli.command('run-eval')
@click.argument('expressions', nargs=-1, required=True)
@click.pass_context
def run_eval(ctx: click.Context, expressions: tuple[str, ...]) -> None:
    runner = SnxRunner(ctx.obj['config'])
    for expression in expressions:
        runner.evaluate_expression(expression)
    ctx.exit(runner.finalize())


@cli.command('run-repl')
@click.pass_context
def run_repl(ctx: click.Context) -> None:
    runner = SnxRunner(ctx.obj['config'])
    runner.repl()
    ctx.exit(runner.finalize())


def main(argv: list[str] | None = None) -> None:
    a = list(sys.argv[1:] if argv is None else argv)
    g, r, i = [], [], 0
    while i < len(a):
        t = a[i]
        if t in ('--no-exec', '--stats', '--plain', '-p') or re.fullmatch(r'-v+|--verbose', t) or t.startswith('--style='):
            g.append(t)
        elif t == '--style' and i + 1 < len(a):
            g += [t, a[i+1]]; i += 1
        else:
            r.append(t)
        i += 1

    if len(r) == 0:
        # No args: if stdin has data, treat as file '-', else REPL
        cmd, tail = ('run-file', ['-']) if not sys.stdin.isatty() else ('run-repl', [])
    elif r[0] in ('--help', '-h'):
        cmd, tail = '--help', []
    elif r[0] in cli.commands:
        cmd, tail = r[0], r[1:]
    elif r[0] in ('-c', '--command'):
        cmd, tail = 'run-eval', ['--', *r[1:]]
    elif r[0] in ('-r', '--repl'):
        cmd, tail = 'run-repl', []
    else:
        cmd, tail = 'run-file', r

    cli.main(args=[*g, cmd, *tail], prog_name='snx')


if __name__ == "__main__":
    main()
