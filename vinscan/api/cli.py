"""
Command-line adapter for VIN SCAN.

Architectural role:
- Exposes each adapter operation as a subcommand for terminal use.
- Provides an interactive KHABIR chat loop with local session commands.
- Delegates all oracle work to `vinscan.core.adapter.VehicleAIAdapter`.

Subcommands:
- `decode VIN`: text VIN decode.
- `scan IMAGE [--mode]`: image decode (path, `file://` URL or data URI).
- `refine IMAGE --brand BRAND`: image refinement for a known brand.
- `report VIN`: Markdown expertise report.
- `estimate --brand ... --model ...`: market-value estimate.
- `chat`: interactive follow-up session.

Hard trigger handling (chat loop):
- `exit` / `quit` leaves the loop.
- `clear` starts a new, empty conversation history.

Error handling strategy:
- Package errors (`VinScanError`) print a one-line message and exit with 1.
- EOF and keyboard interrupts end the chat loop without traceback output.

Response formatting:
- Structured results are printed as indented JSON (UTF-8, unescaped).
- Report and chat replies are printed as plain text.
"""

from dotenv import load_dotenv

load_dotenv()

import argparse
import asyncio
import json
import logging
import os
import sys

from vinscan.api.multimodal.image_input import load_image
from vinscan.core.adapter import VehicleAIAdapter, create_adapter
from vinscan.core.errors import VinScanError
from vinscan.core.vehicle_types import ConversationHistory, ScanMode, VehicleAnalysis


# =========================================================
# UTF-8 SAFE OUTPUT
# Best-effort stdout encoding normalization for interactive terminals.
# =========================================================

if hasattr(sys.stdout, "reconfigure"):
    try:
        sys.stdout.reconfigure(encoding="utf-8", errors="ignore")
    except (AttributeError, ValueError):
        pass


def _print_json(data) -> None:
    print(json.dumps(data, ensure_ascii=False, indent=2))


# =========================================================
# CHAT LOOP
# =========================================================

def run_chat(adapter: VehicleAIAdapter, read=input) -> ConversationHistory:
    """
    Run the interactive chat session and return its final history.

    Each answered question is recorded in the history, which is replayed in
    full on the next turn.
    """
    history = ConversationHistory()

    print("KHABIR est prêt. (Tapez 'exit' pour quitter, 'clear' pour recommencer)")
    print("-" * 60)

    while True:
        try:
            question = read("Question: ").strip()
        except EOFError:
            print()
            break
        except KeyboardInterrupt:
            print("\nOpération annulée.")
            break

        if not question:
            continue

        if question.lower() in ("exit", "quit"):
            break

        if question.lower() == "clear":
            history = ConversationHistory()
            print("Conversation effacée.")
            continue

        answer = asyncio.run(adapter.chat(history, question))
        history.record(question, answer)

        print(f"\n{answer}\n")
        print("-" * 60)

    return history


# =========================================================
# ARGUMENT PARSING
# =========================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vinscan",
        description="Identification et estimation de véhicules (marché marocain).",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    decode = sub.add_parser("decode", help="Décoder un VIN saisi")
    decode.add_argument("vin")

    scan = sub.add_parser("scan", help="Extraire le VIN d'une photo")
    scan.add_argument("image")
    scan.add_argument(
        "--mode",
        choices=[mode.value for mode in ScanMode],
        default=ScanMode.VIN.value,
    )

    refine = sub.add_parser("refine", help="Affiner l'analyse d'une photo")
    refine.add_argument("image")
    refine.add_argument("--brand", required=True)

    report = sub.add_parser("report", help="Rapport d'expertise Markdown")
    report.add_argument("vin")

    estimate = sub.add_parser("estimate", help="Estimer la valeur marchande (MAD)")
    estimate.add_argument("--brand", required=True)
    estimate.add_argument("--model", required=True)
    estimate.add_argument("--year", dest="year_of_manufacture")
    estimate.add_argument("--registration-year", dest="registration_year")
    estimate.add_argument("--motorization")
    estimate.add_argument("--fuel-type", dest="fuel_type")
    estimate.add_argument("--notes", dest="inventory_notes")

    sub.add_parser("chat", help="Discuter avec KHABIR")

    return parser


def _vehicle_from_args(args) -> VehicleAnalysis:
    return VehicleAnalysis(
        brand=args.brand,
        model=args.model,
        year_of_manufacture=args.year_of_manufacture,
        registration_year=args.registration_year,
        motorization=args.motorization,
        fuel_type=args.fuel_type,
        inventory_notes=args.inventory_notes,
    )


def dispatch(args, adapter: VehicleAIAdapter) -> None:
    """Run the operation selected by `args.command` and print its result."""
    if args.command == "decode":
        _print_json(asyncio.run(adapter.decode_by_vin(args.vin)))

    elif args.command == "scan":
        image = load_image(args.image)
        _print_json(asyncio.run(adapter.decode_from_image(image, args.mode)))

    elif args.command == "refine":
        image = load_image(args.image)
        _print_json(asyncio.run(adapter.refine_from_image(image, args.brand)))

    elif args.command == "report":
        print(asyncio.run(adapter.generate_report(args.vin)))

    elif args.command == "estimate":
        _print_json(asyncio.run(adapter.estimate_market_value(_vehicle_from_args(args))))

    elif args.command == "chat":
        run_chat(adapter)


# =========================================================
# MAIN
# =========================================================

def main(argv=None, adapter: VehicleAIAdapter | None = None) -> int:
    """
    Parse arguments, build the adapter and run one command.

    Returns:
        Process exit code (0 on success, 1 on a package error).
    """
    logging.basicConfig(level=os.getenv("LOG_LEVEL", "WARNING").upper())

    args = build_parser().parse_args(argv)

    try:
        dispatch(args, adapter or create_adapter())
    except VinScanError as e:
        print(f"Erreur: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
