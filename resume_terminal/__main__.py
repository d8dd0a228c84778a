import argparse
import logging
import os
import sys
from dataclasses import replace

from colorama import init as colorama_init

from .config import DEFAULT_CONFIG_PATH, load_settings
from .loader import load_resume
from .session import TerminalSession, run_script
from .shell import ResumeShell, render_output


def run_startup(session: TerminalSession, script_path: str, prompt: str) -> int:
    """Run a file of commands before the interactive loop, echoing each one."""
    if not os.path.exists(script_path):
        print(f"Startup error: file not found: {script_path}", file=sys.stderr)
        return 2
    with open(script_path, "r", encoding="utf-8") as f:
        for line in f:
            if not line.strip() or line.lstrip().startswith("#"):
                continue
            print(prompt.format(cwd=session.cwd) + line.rstrip("\n"))
            for output in run_script(session, [line]):
                print(render_output(output))
    return 0


def main(argv=None) -> None:
    ap = argparse.ArgumentParser(description="Explore a resume from a simulated shell")
    ap.add_argument("--resume", default=None, help="resume file (YAML or JSON)")
    ap.add_argument("--config", default=DEFAULT_CONFIG_PATH, help="settings file (YAML)")
    ap.add_argument("--startup", default=None, help="file of commands to run first")
    ap.add_argument("--log-level", default=None, help="logging level, e.g. DEBUG")
    ap.add_argument("--no-colour", action="store_true", help="disable coloured output")
    args = ap.parse_args(argv)

    settings = load_settings(args.config)
    if args.resume:
        settings = replace(settings, resume_path=args.resume)
    if args.log_level:
        settings = replace(settings, log_level=args.log_level.upper())
    if args.no_colour:
        settings = replace(settings, colour=False)

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )
    colorama_init(autoreset=True, strip=None if settings.colour else True)

    session = TerminalSession(load_resume(settings.resume_path))
    if args.startup:
        rc = run_startup(session, args.startup, settings.prompt)
        if rc != 0:
            sys.exit(rc)
    ResumeShell(session, settings.prompt).cmdloop()


if __name__ == "__main__":
    main()
