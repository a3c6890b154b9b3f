#!/usr/bin/env python3
"""
Capability Analysis Example

Analyzes a FHIR server and checks a resource set before building.

Usage:
    python examples/analyze_server.py --server https://hapi.fhir.org/baseR4/metadata
"""

import argparse
import json

from fhir_builder import BuildOrchestrator
from fhir_builder.errors import BuilderError


def main():
    parser = argparse.ArgumentParser(description="Analyze a FHIR capability statement")
    parser.add_argument(
        "--server", "-s",
        default="https://hapi.fhir.org/baseR4/metadata",
        help="Capability statement URL",
    )
    parser.add_argument(
        "--resources", "-r",
        nargs="+",
        default=["Patient", "MedicationOrder", "CarePlan"],
        help="Resources to check",
    )
    args = parser.parse_args()

    orchestrator = BuildOrchestrator()

    try:
        analysis, check, estimate = orchestrator.check_resources(args.server, args.resources)
    except BuilderError as e:
        print(f"Error: {e.user_message}")
        raise SystemExit(1)

    print(f"FHIR version: {analysis.version}")
    print(f"Supported resources: {len(analysis.supported_resources)}")
    print("Recommended:")
    print(json.dumps(analysis.recommended_resources, indent=2))

    if not check.valid:
        print(f"Unsupported: {', '.join(check.unsupported_resources)}")
        print(f"Try instead: {', '.join(check.suggestions) or '-'}")

    print(f"Complexity: {estimate.complexity.value}, ~{estimate.estimated_hours}h")
    for factor in estimate.factors:
        print(f"  - {factor}")


if __name__ == "__main__":
    main()
