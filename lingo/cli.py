"""
Lingo CLI - Command-line interface for the game backend.

Usage:
    lingo serve [--host HOST] [--port PORT]   Run the webhook server
    lingo play [--user UID] [--seed N]        Play in the terminal
    lingo vocab <uid> [--dir DIR]             Print a user's vocabulary
"""

import argparse
import json
import sys
import uuid

# Typed commands in `lingo play` -> webhook handler names
PLAY_COMMANDS = {
    "one pic": "lang_start_one_pic",
    "multiple words": "lang_start_multiple_words",
    "conversation": "lang_start_conversation",
    "vocab": "lang_start_vocab",
    "next": "lang_next_question",
    "menu": "lang_change_game",
    "help": "lang_instructions",
}


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Lingo - Voice-assistant language game backend",
        prog="lingo",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the webhook server")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve_parser.add_argument("--port", type=int, default=8000, help="Bind port")
    serve_parser.add_argument("--reload", action="store_true", help="Reload on code changes")

    # Play command
    play_parser = subparsers.add_parser("play", help="Play in the terminal")
    play_parser.add_argument("--user", default="cli-user", help="User id for the vocabulary")
    play_parser.add_argument("--seed", type=int, default=None, help="Seed for pictures and hints")
    play_parser.add_argument("--attempts", type=int, default=None, help="Wrong guesses per round")

    # Vocab command
    vocab_parser = subparsers.add_parser("vocab", help="Print a user's vocabulary")
    vocab_parser.add_argument("user_id", help="User id")
    vocab_parser.add_argument("--dir", help="Vocabulary store directory (default: LINGO_VOCAB_DIR or ~/.lingo/vocabulary)")

    args = parser.parse_args()

    if args.command == "serve":
        cmd_serve(args)
    elif args.command == "play":
        cmd_play(args)
    elif args.command == "vocab":
        cmd_vocab(args)
    else:
        parser.print_help()
        sys.exit(1)


def cmd_serve(args):
    """Run the FastAPI app under uvicorn."""
    import uvicorn
    from .api.app import configure_logging

    configure_logging()
    uvicorn.run("lingo.api.app:app", host=args.host, port=args.port, reload=args.reload)


def cmd_play(args):
    """Drive the intent handlers from typed input."""
    import random

    from .api.app import build_service, configure_logging
    from .api.schemas import ErrorResponse, IntentParam, UserInfo, DeviceInfo, WebhookRequest
    from .game import GameConfig
    from .providers import WordBankImageProvider

    configure_logging("WARNING")

    config = GameConfig(seed=args.seed)
    if args.attempts is not None:
        config.attempts = args.attempts
    service = build_service(
        config=config,
        image_provider=WordBankImageProvider(rng=random.Random(args.seed)),
    )

    session_id = str(uuid.uuid4())
    user = UserInfo(uid=args.user, name=args.user)
    device = DeviceInfo(capabilities=["SPEECH", "INTERACTIVE_CANVAS"])

    def send(handler, **params):
        request = WebhookRequest(
            handler=handler,
            session_id=session_id,
            intent_params={k: IntentParam(original=str(v), resolved=v) for k, v in params.items()},
            user=user,
            device=device,
        )
        result = service.handle_webhook(request)
        if isinstance(result, ErrorResponse):
            print(f"Error: {result.error}")
            return
        for prompt in result.prompts:
            print(f"  assistant> {prompt}")
        if result.canvas and result.canvas.data:
            for update in result.canvas.data:
                print(f"  canvas> {json.dumps(update, ensure_ascii=False)}")
        print(f"  [scene: {result.scene}]")

    print("Commands: " + ", ".join(sorted(PLAY_COMMANDS)) + ", article <n>, quit")
    print("Anything else is said to the assistant as a word.")
    send("lang_welcome")

    while True:
        try:
            line = input("you> ").strip()
        except (EOFError, KeyboardInterrupt):
            print()
            break
        if not line:
            continue
        if line == "quit":
            break

        lowered = line.lower()
        if lowered in PLAY_COMMANDS:
            send(PLAY_COMMANDS[lowered])
        elif lowered.startswith("article "):
            send("lang_article", article_number=lowered.split(" ", 1)[1])
        else:
            send("lang_word", word=line)

    service.end_session(session_id)


def cmd_vocab(args):
    """Print stored word pairs."""
    from .api.app import build_vocabulary_store
    from .providers import ProviderError

    store = build_vocabulary_store(args.dir)
    try:
        pairs = store.fetch_pairs(args.user_id)
    except ProviderError as e:
        print(f"Error: {e}")
        sys.exit(1)

    if not pairs:
        print(f"No words stored for {args.user_id}")
        return
    for pair in pairs:
        print(f"{pair.english:<20} {pair.spanish}")
    print(f"\n{len(pairs)} word(s)")


if __name__ == "__main__":
    main()
