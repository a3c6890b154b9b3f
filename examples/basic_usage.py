#!/usr/bin/env python3
"""
Basic Usage Example

Demonstrates the simplest way to generate a FHIR application scaffold.

Usage:
    python examples/basic_usage.py

Requirements:
    - Network access to the public HAPI FHIR server
    - pip install fhir-builder
"""

from fhir_builder import BuildOrchestrator, BuildRequest


def main():
    orchestrator = BuildOrchestrator()

    request = BuildRequest(
        capability_statement_url="https://hapi.fhir.org/baseR4/metadata",
        stack="python_flask",
        resources=["Patient", "Observation", "Condition"],
        app_name="Clinic Dashboard",
        features=["docker", "tests"],
    )

    record = orchestrator.create_build(request)

    print(f"Build ready: {record.build_id}")
    print(f"Download: {record.download_url}")
    print(f"Expires: {record.expires_at.isoformat()}")

    # Save the archive next to the script
    archive = orchestrator.get_build(record.build_id)
    with open("clinic-dashboard.zip", "wb") as f:
        f.write(archive)

    print(f"\n--- Saved {len(archive)} bytes to clinic-dashboard.zip ---")


if __name__ == "__main__":
    main()
