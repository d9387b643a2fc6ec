"""ConstructionDNA command-line interface."""
from __future__ import annotations

import argparse
import json
import sys

from construction_dna import __version__


def _build_parser():
    parser = argparse.ArgumentParser(
        prog="construction-dna",
        description="Engineering Q&A over a 20-tier construction material catalog",
    )
    parser.add_argument("--version", action="version", version="ConstructionDNA v%s" % __version__)
    parser.add_argument("--catalog", help="YAML material catalog to load instead of the bundled sample")
    parser.add_argument("--data-dir", default="data", help="Directory for logs and audit records")
    parser.add_argument("--json", action="store_true", help="Print machine-readable JSON")

    sub = parser.add_subparsers(dest="command")

    ask = sub.add_parser("ask", help="Answer an engineering question")
    ask.add_argument("question")
    ask.add_argument("--material", action="append", default=[], dest="materials",
                     help="Restrict the answer to this material id (repeatable)")

    parse = sub.add_parser("parse", help="Show how a question is understood")
    parse.add_argument("question")

    predict = sub.add_parser("predict", help="Rank failure modes for a material")
    predict.add_argument("material_id")
    predict.add_argument("--temperature", type=float, help="Service temperature in °F")
    predict.add_argument("--moisture", choices=["dry", "damp", "wet", "submerged"])
    predict.add_argument("--exposure", choices=["full", "partial", "none"])

    compat = sub.add_parser("compat", help="Check two materials for compatibility")
    compat.add_argument("material_id_1")
    compat.add_argument("material_id_2")

    materials = sub.add_parser("materials", help="List or search catalog materials")
    materials.add_argument("--chemistry")
    materials.add_argument("--manufacturer")
    materials.add_argument("--search", help="Keyword search query")

    return parser


def _print_json(payload) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


def _do_ask(engine, args):
    from construction_dna.core.models import QuestionContext

    context = QuestionContext(material_ids=args.materials) if args.materials else None
    answer = engine.ask(args.question, context)
    if args.json:
        _print_json(answer.to_dict())
        return 0

    print("=" * 60)
    print("  Intent:     %s (confidence %.2f)" % (answer.intent.value, answer.confidence))
    print("  Materials:  %s" % (", ".join(m.display_name for m in answer.materials) or "-"))
    print("=" * 60)
    print(answer.answer)
    if answer.explanation:
        print()
        print(answer.explanation)
    if answer.recommendations:
        print()
        print("  --- Recommendations ---")
        for r in answer.recommendations:
            print("  - %s" % r)
    if answer.warnings:
        print()
        print("  --- Warnings ---")
        for w in answer.warnings:
            print("  ! %s" % w)
    return 0


def _do_parse(engine, args):
    parsed = engine.parse_question(args.question)
    if args.json:
        _print_json(parsed.to_dict())
        return 0
    entities = parsed.entities
    print("  Intent:       %s" % parsed.intent.value)
    print("  Confidence:   %.2f" % parsed.confidence)
    print("  Keywords:     %s" % ", ".join(parsed.keywords))
    print("  Chemistries:  %s" % ", ".join(entities.chemistries))
    print("  Materials:    %s" % ", ".join(entities.materials))
    print("  Conditions:   %s" % ", ".join(entities.conditions))
    print("  Temperatures: %s" % ", ".join("%g°%s" % (t.value, t.unit) for t in entities.temperatures))
    return 0


def _do_predict(engine, args):
    from construction_dna.core.models import EnvironmentConditions

    if engine.store.get(args.material_id) is None:
        print("Material '%s' not found" % args.material_id, file=sys.stderr)
        return 1
    conditions = EnvironmentConditions(
        temperature=args.temperature, moisture=args.moisture, exposure=args.exposure,
    )
    predictions = engine.predict_failures(args.material_id, conditions)
    if args.json:
        _print_json([p.to_dict() for p in predictions])
        return 0
    for p in predictions:
        print("  %-8s %-32s %5.2f" % (p.failure_mode.id, p.failure_mode.name, p.probability))
        for factor in p.risk_factors:
            print("           * %s" % factor)
    if not predictions:
        print("  No failure modes recorded for this material.")
    return 0


def _do_compat(engine, args):
    result = engine.check_compatibility(args.material_id_1, args.material_id_2)
    if args.json:
        _print_json(result.to_dict())
    else:
        print("  Status: %s" % result.status.value.upper())
        print("  %s" % result.explanation)
        for req in result.requirements:
            print("  - %s" % req)
    return 0 if result.found else 1


def _do_materials(engine, args):
    if args.search:
        materials = engine.search(args.search)
    else:
        materials = engine.store.list_materials(chemistry=args.chemistry, manufacturer=args.manufacturer)
    if args.json:
        _print_json([m.summary() for m in materials])
        return 0
    for m in materials:
        s = m.summary()
        print("  %-20s %-10s %-8s %s" % (m.id, s["chemistry"] or "-", s["manufacturer"] or "-", m.display_name))
    return 0


_COMMANDS = {
    "ask": _do_ask,
    "parse": _do_parse,
    "predict": _do_predict,
    "compat": _do_compat,
    "materials": _do_materials,
}


def main(argv=None):
    parser = _build_parser()
    args = parser.parse_args(argv)

    handler = _COMMANDS.get(args.command)
    if handler is None:
        parser.print_help()
        return 0

    from construction_dna.core.engine import Engine

    engine = Engine(data_dir=args.data_dir, catalog_path=args.catalog)
    engine.initialize()
    try:
        return handler(engine, args)
    finally:
        engine.shutdown()


if __name__ == "__main__":
    sys.exit(main())
