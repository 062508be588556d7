#!/usr/bin/env python3
"""
Executa um programa GridScript a partir da linha de comando,
ou inicia a IDE web com --serve.
"""
import argparse
import logging
import sys

from commands import format_program
from config import Limits, ServerSettings
from display import CursesDisplay, TranscriptDisplay
from errors import ParseError, ScriptError
from interpreter import Interpreter
from parser import parse

EXIT_FAILURE = -1


def build_arg_parser():
    arg_parser = argparse.ArgumentParser(description="GridScript interpreter")
    arg_parser.add_argument("program", nargs="?", help="program file to run")
    arg_parser.add_argument("--transcript", action="store_true",
                            help="print 'row col text' lines instead of drawing on the terminal")
    arg_parser.add_argument("--dump", action="store_true", help="print the command table before running")
    arg_parser.add_argument("--verbose", action="store_true", help="log each execution step")
    arg_parser.add_argument("--serve", action="store_true", help="start the web IDE")
    return arg_parser


def load_program(path):
    try:
        with open(path) as f:
            source = f.read()
    except OSError as e:
        print(f"Error opening file {path}: {e.strerror}")
        return None

    try:
        return parse(source)
    except ParseError as e:
        print(e)
        print("Error: Could not build runtime")
        return None


def run_transcript(program, limits):
    interpreter = Interpreter(program, TranscriptDisplay(sys.stdout), limits)
    try:
        interpreter.run()
    except ScriptError as e:
        print(e)


def run_interactive(program, limits):
    import curses

    errors = []

    def session(window):
        curses.curs_set(0)
        display = CursesDisplay(window)
        try:
            Interpreter(program, display, limits).run()
        except ScriptError as e:
            errors.append(e)
        display.wait_for_quit()

    curses.wrapper(session)
    # A mensagem de erro só aparece depois que o terminal é restaurado
    for error in errors:
        print(error)


def serve():
    import uvicorn

    settings = ServerSettings.from_env()
    print("🚀 GridScript IDE")
    print(f"🔄 Iniciando servidor em http://{settings.host}:{settings.port}")
    try:
        uvicorn.run("main:app", host=settings.host, port=settings.port, reload=settings.reload)
    except KeyboardInterrupt:
        print("\n👋 Servidor interrompido. Até logo!")
    return 0


def main(argv=None):
    args = build_arg_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.serve:
        return serve()

    if args.program is None:
        print(f"Usage: {sys.argv[0]} <filename>")
        return EXIT_FAILURE

    program = load_program(args.program)
    if program is None:
        return EXIT_FAILURE

    if args.dump:
        print(format_program(program))

    limits = Limits()
    if args.transcript or not sys.stdout.isatty():
        run_transcript(program, limits)
    else:
        run_interactive(program, limits)
    return 0


if __name__ == "__main__":
    sys.exit(main())
