"""
Script to add sample data to the classreport platform via REST API.
Make sure the server is running before executing this script.

Usage:
    python add_data.py
"""

import json
import os
import sys

import requests


def _console_supports_utf8() -> bool:
    enc = getattr(sys.stdout, "encoding", None)
    return enc is not None and "utf" in enc.lower()


_OK_CHAR = "✓" if _console_supports_utf8() else "[OK]"
_FAIL_CHAR = "✗" if _console_supports_utf8() else "[FAIL]"

GOALS = ["Requirements", "Configuration Management", "Project Management", "Design", "Tests", "Refactoring"]

SAMPLE_STUDENTS = [
    ("Alice Johnson", "111.111.111-11", ["MA", "MA", "MA", "MA", "MA", "MA"]),
    ("Bob Smith", "222.222.222-22", ["MPA", "MPA", "MPA", "MPA", "MPA", "MPA"]),
    ("Carol Davis", "333.333.333-33", ["MANA", "MANA", "MPA", "MANA", "MANA", "MANA"]),
    ("David Wilson", "444.444.444-44", ["MA", "MPA", "MA", "MANA"]),
    ("Emma Brown", "555.555.555-55", []),
]


def _detect_base_url() -> str:
    """Determine a reachable BASE_URL.

    Priority: environment variable `CLASSREPORT_BASE_URL`, then common local ports.
    If nothing responds, fall back to http://127.0.0.1:3005.
    """
    env = os.environ.get("CLASSREPORT_BASE_URL")
    if env:
        return env

    candidates = [
        "http://127.0.0.1:3005",
        "http://127.0.0.1:8000",
        "http://localhost:3005",
        "http://localhost:8000",
    ]

    for c in candidates:
        try:
            resp = requests.get(f"{c}/health", timeout=0.5)
            if resp.status_code == 200:
                return c
        except requests.exceptions.RequestException:
            continue

    return candidates[0]


class SampleDataLoader:
    """Posts sample classes, students and grades to a running server.

    ``client`` is anything with requests-style ``get``/``post``/``put``
    methods; a ``requests.Session`` by default.
    """

    def __init__(self, base_url: str = "", client=None):
        self._base_url = base_url.rstrip("/")
        self._client = client or requests.Session()

    def _url(self, path: str) -> str:
        return f"{self._base_url}{path}"

    def check_server(self) -> bool:
        """Check if the server is running."""
        try:
            response = self._client.get(self._url("/health"), timeout=2)
        except requests.exceptions.RequestException:
            response = None
        if response is not None and response.status_code == 200:
            print(f"{_OK_CHAR} Server is running")
            return True
        print(f"{_FAIL_CHAR} Server is not running!")
        print("\nPlease start the server first:")
        print("  classreport --port 3005")
        return False

    def create_class(self, topic, semester, year):
        response = self._client.post(self._url("/api/classes"),
                                     json={"topic": topic, "semester": semester, "year": year})
        if response.status_code == 201:
            class_id = response.json()["id"]
            print(f"{_OK_CHAR} Created class: {class_id}")
            return class_id
        print(f"{_FAIL_CHAR} Failed to create class: {response.text}")
        return None

    def create_student(self, name, cpf):
        response = self._client.post(self._url("/api/students"), json={"name": name, "cpf": cpf})
        if response.status_code == 201:
            print(f"{_OK_CHAR} Created student: {name} ({cpf})")
            return response.json()
        print(f"{_FAIL_CHAR} Failed to create student: {response.text}")
        return None

    def enroll_student(self, class_id, cpf):
        response = self._client.post(self._url(f"/api/classes/{class_id}/enroll"), json={"studentCPF": cpf})
        if response.status_code == 201:
            print(f"{_OK_CHAR} Enrolled student {cpf} in {class_id}")
            return True
        print(f"{_FAIL_CHAR} Failed to enroll student: {response.text}")
        return False

    def set_grade(self, class_id, cpf, goal, grade):
        response = self._client.put(self._url(f"/api/classes/{class_id}/enrollments/{cpf}/evaluation"),
                                    json={"goal": goal, "grade": grade})
        if response.status_code != 200:
            print(f"{_FAIL_CHAR} Failed to grade {cpf} on {goal}: {response.text}")
            return False
        return True

    def get_report(self, class_id):
        response = self._client.get(self._url(f"/api/classes/{class_id}/report"))
        if response.status_code == 200:
            report = response.json()
            print(f"\n{'='*60}")
            print(f"Report for {class_id}")
            print(f"{'='*60}")
            print(json.dumps(report, indent=2))
            return report
        print(f"{_FAIL_CHAR} Failed to get report: {response.text}")
        return None

    def load(self, topic="Software Engineering", semester=1, year=2025):
        """Create one class, enroll every sample student and record their grades."""
        class_id = self.create_class(topic, semester, year)
        if class_id is None:
            return None

        for name, cpf, grades in SAMPLE_STUDENTS:
            student = self.create_student(name, cpf)
            if student is None:
                continue
            if not self.enroll_student(class_id, student["cpf"]):
                continue
            for goal, grade in zip(GOALS, grades):
                self.set_grade(class_id, student["cpf"], goal, grade)

        return self.get_report(class_id)


def main():
    """Main execution."""
    print("="*60)
    print("classreport - Data Addition Script")
    print("="*60)
    print()

    base_url = _detect_base_url()
    loader = SampleDataLoader(base_url)
    if not loader.check_server():
        sys.exit(1)

    print("\nAdding Sample Data...\n")
    if loader.load() is None:
        sys.exit(1)

    print("\n" + "="*60)
    print(f"{_OK_CHAR} Sample data added successfully!")
    print("="*60)
    print("\nYou can now:")
    print(f"  - View API docs: {base_url}/docs")
    print(f"  - List classes: curl {base_url}/api/classes")
    print()


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        print(f"\n\n{_FAIL_CHAR} Interrupted by user")
        sys.exit(1)
