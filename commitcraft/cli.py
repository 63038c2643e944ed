"""Command-line interface for commitcraft."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional

from . import __version__
from .commit import (
    commit_message,
    edit_command,
    format_git_command,
    format_heredoc_command,
    run_shell_command,
)
from .config import (
    DEFAULT_ALIASES,
    DEFAULT_MODELS,
    MODEL_CATALOG,
    Config,
    config_file_path,
    describe_provider,
    load_config,
    load_persisted_config,
    save_config,
)
from .exceptions import CommitCraftError
from .git import GitRepo
from .llm import LLMClient
from .schema import CommitMessage, GenerationRequest
from .validator import validate_title

RESET = "\033[0m"
BOLD = "\033[1m"
CYAN = "\033[96m"
GREEN = "\033[92m"
YELLOW = "\033[93m"
DIM = "\033[2m"
RED = "\033[91m"

RULE = "─" * 50


class CLI:
    """Generate a commit message for the staged changes and commit it."""

    def __init__(self) -> None:
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog="commitcraft",
            description=(
                "Generate conventional commit messages for staged changes "
                "using OpenAI, Gemini or Anthropic models."
            ),
        )
        parser.add_argument(
            "--version", action="version", version=f"%(prog)s {__version__}"
        )
        parser.add_argument(
            "-p",
            "--provider",
            choices=sorted(DEFAULT_MODELS),
            help="AI provider to use. Overrides the configured default.",
        )
        parser.add_argument(
            "-m",
            "--model",
            help="Model or alias to use (e.g. 'fast', 'gpt-4o').",
        )
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Print the generated message without committing.",
        )
        parser.add_argument(
            "-r",
            "--review",
            action="store_true",
            help="Open the message in your editor before committing.",
        )
        parser.add_argument(
            "-v",
            "--verbose",
            action="store_true",
            help="Show the diff being analyzed.",
        )
        parser.add_argument(
            "--include-files",
            action="store_true",
            help="Include staged file names in the prompt.",
        )
        parser.add_argument(
            "-s",
            "--show-command",
            action="store_true",
            help="Print the git command instead of editing it interactively.",
        )
        parser.add_argument(
            "--legacy",
            action="store_true",
            help="Show the message and ask for confirmation before committing.",
        )
        parser.add_argument(
            "-f",
            "--force",
            action="store_true",
            help="With --legacy, commit without asking for confirmation.",
        )
        parser.add_argument(
            "-y",
            "--yes",
            action="store_true",
            help="Commit immediately without editing the command.",
        )
        parser.add_argument(
            "--timeout",
            type=float,
            help="HTTP timeout in seconds for the provider request.",
        )
        parser.add_argument(
            "--repo-path",
            help="Path to the git repository (defaults to the current directory).",
        )
        parser.add_argument(
            "--debug", action="store_true", help="Enable debug logging."
        )
        sub = parser.add_subparsers(dest="command")
        sub.add_parser("setup", help="Interactively configure providers and keys.")
        sub.add_parser("list", help="List providers, models and aliases.")
        sub.add_parser("config", help="Show the current configuration.")
        return parser

    def run(self, args: Optional[list[str]] = None) -> int:
        try:
            parsed = self.parser.parse_args(args)
        except SystemExit as e:  # argparse exits on --help / errors
            return int(e.code or 0)

        if parsed.debug:
            logging.basicConfig(
                level=logging.DEBUG,
                format="%(levelname)s %(name)s: %(message)s",
            )

        try:
            if parsed.command == "setup":
                return self._run_setup()
            if parsed.command == "list":
                return self._list_providers(parsed)
            if parsed.command == "config":
                return self._show_config(parsed)
            return self._generate(parsed)
        except CommitCraftError as e:
            self._print_error(str(e))
            return 1
        except (KeyboardInterrupt, EOFError):
            print(f"\n{YELLOW}Cancelled.{RESET}")
            return 130

    # ------------------------------------------------------------------
    # Generation flow
    # ------------------------------------------------------------------
    def _load_config(self, parsed: argparse.Namespace) -> Config:
        return load_config(
            overrides={
                "provider": parsed.provider,
                "model": parsed.model,
                "timeout": parsed.timeout,
                "include_files": True if parsed.include_files else None,
            }
        )

    def _generate(self, parsed: argparse.Namespace) -> int:
        config = self._load_config(parsed)
        repo = GitRepo(parsed.repo_path)
        diff = repo.get_staged_diff()

        if parsed.verbose:
            print(f"{BOLD}Analyzing the following diff:{RESET}")
            print(RULE)
            print(f"{DIM}{diff}{RESET}")
            print(RULE)

        request = GenerationRequest(
            diff_text=diff,
            model_id=config.resolve_model(),
            api_key=config.resolve_api_key(),
            file_list=tuple(repo.list_staged_files()) if config.include_files else (),
            include_files=config.include_files,
            repo_context=repo.repo_context(),
        )
        print(
            f"Using provider: {CYAN}{config.provider}{RESET} "
            f"({CYAN}{request.model_id}{RESET})"
        )
        client = LLMClient(
            config.provider,
            timeout=config.request_timeout,
            endpoint=config.endpoints.get(config.provider),
        )
        message = client.generate_commit_message(request)
        print(f"{GREEN}✓ Message generated successfully!{RESET}")
        for problem in validate_title(message.title):
            print(f"{YELLOW}Warning:{RESET} {problem}", file=sys.stderr)

        if parsed.dry_run:
            print(f"\n{BOLD}Generated Commit Message:{RESET}\n---")
            print(f"{GREEN}{message.to_git_message()}{RESET}\n---")
            return 0
        if parsed.show_command:
            print(f"\n{BOLD}Generated git command:{RESET}")
            print(f"{CYAN}{format_heredoc_command(message, parsed.review)}{RESET}")
            return 0
        if parsed.legacy:
            return self._legacy_commit(message, repo, parsed.force, parsed.review)
        if parsed.yes:
            output = commit_message(message, cwd=repo.repo_path, review=parsed.review)
            self._print_success(output)
            return 0
        return self._interactive_commit(message, repo, parsed.review)

    def _legacy_commit(
        self, message: CommitMessage, repo: GitRepo, force: bool, review: bool
    ) -> int:
        print(f"\n{BOLD}Proposed Commit:{RESET}\n---")
        print(f"{GREEN}{message.to_git_message()}{RESET}\n---")
        if not force:
            answer = input("Do you want to commit with this message? (Y/n) ")
            if answer.strip().lower() in {"n", "no"}:
                print(f"{YELLOW}Commit aborted by user.{RESET}")
                return 0
        output = commit_message(message, cwd=repo.repo_path, review=review)
        self._print_success(output)
        return 0

    def _interactive_commit(
        self, message: CommitMessage, repo: GitRepo, review: bool
    ) -> int:
        print(f"\n{BOLD}Generated commit message:{RESET}")
        print(RULE)
        print(f"{GREEN}{message.to_git_message()}{RESET}")
        print(RULE)
        print(f"\n{BOLD}Edit the command below (or press Enter to execute):{RESET}")
        command = edit_command(format_git_command(message, review))
        if not command:
            print(f"{YELLOW}Commit cancelled.{RESET}")
            return 0
        print(f"\n{BOLD}Executing:{RESET} {CYAN}{command}{RESET}")
        output = run_shell_command(command, cwd=repo.repo_path)
        self._print_success(output)
        return 0

    # ------------------------------------------------------------------
    # Subcommands
    # ------------------------------------------------------------------
    def _run_setup(self) -> int:
        print(f"{BOLD}{GREEN}Welcome to commitcraft setup!{RESET}")
        config = load_persisted_config() or Config()
        choices = ", ".join(DEFAULT_MODELS)
        provider = input(
            f"Which AI provider do you want to use by default? ({choices}) "
        ).strip().lower()
        if provider:
            if provider not in DEFAULT_MODELS:
                self._print_error(f"Unknown provider '{provider}'.")
                return 1
            config.provider = provider

        print("\nNow, let's add API keys. You can leave any of them blank.")
        for name in DEFAULT_MODELS:
            key = input(f"Enter your {name} API key: ").strip()
            if key:
                config.api_keys[name] = key

        answer = input(
            "Set up model aliases 'fast' and 'smart'? [Y/n] "
        ).strip().lower()
        if answer in {"", "y", "yes"}:
            config.aliases.update(DEFAULT_ALIASES)

        path = save_config(config)
        print(f"\n{BOLD}{GREEN}Setup complete!{RESET} Saved to {path}")
        return 0

    def _list_providers(self, parsed: argparse.Namespace) -> int:
        config = self._load_config(parsed)
        print(f"{BOLD}Providers:{RESET}")
        for name in DEFAULT_MODELS:
            marker = "*" if name == config.provider else " "
            configured = config.models.get(name, "")
            print(f" {marker} {describe_provider(name)} -> {configured}")
            for model, note in MODEL_CATALOG[name]:
                print(f"     • {model}" + (f" ({note})" if note else ""))
        if config.aliases:
            print(f"\n{BOLD}Aliases:{RESET}")
            for alias, model in sorted(config.aliases.items()):
                print(f"   {alias} -> {model}")
        print(f"\n{BOLD}Usage examples:{RESET}")
        for name in DEFAULT_MODELS:
            print(f"  commitcraft --provider {name} --model {MODEL_CATALOG[name][0][0]}")
        print(f"\nSet up aliases with '{BOLD}commitcraft setup{RESET}'")
        return 0

    def _show_config(self, parsed: argparse.Namespace) -> int:
        config = self._load_config(parsed)
        print(f"{BOLD}Config file:{RESET} {config_file_path()}")
        print(f"{BOLD}Provider:{RESET} {config.provider}")
        print(f"{BOLD}Model:{RESET} {config.resolve_model()}")
        print(f"{BOLD}Timeout:{RESET} {config.request_timeout:g}s")
        for name in DEFAULT_MODELS:
            try:
                config.resolve_api_key(name)
                status = f"{GREEN}set{RESET}"
            except CommitCraftError:
                status = f"{DIM}not set{RESET}"
            print(f"  {name} API key: {status}")
        return 0

    # ------------------------------------------------------------------
    # Output helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _print_error(message: str) -> None:
        print(f"{RED}{BOLD}Error:{RESET} {message}", file=sys.stderr)

    @staticmethod
    def _print_success(output: str) -> None:
        print(f"{GREEN}{BOLD}✓ Commit successful!{RESET}")
        if output.strip():
            print(output.rstrip())


def main(argv: Optional[list[str]] = None) -> int:
    return CLI().run(argv)


if __name__ == "__main__":
    sys.exit(main())
