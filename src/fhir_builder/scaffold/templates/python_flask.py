"""
Python + Flask scaffold using requests.
"""

from fhir_builder.scaffold.stacks import TemplateSet

README = """\
# {{ app_name }}

{{ description or "Flask FHIR API for " ~ server_url }}

Flask service forwarding requests to a FHIR {{ fhir_version }} server.

Endpoints:
{% for resource in resources %}
- `/api/{{ resource | kebab }}`{% if interactions.get(resource) %} ({{ interactions[resource] | join(", ") }}){% endif %}

{% endfor %}

```bash
python -m venv .venv && . .venv/bin/activate
pip install -r requirements.txt
cp .env.example .env
flask --app app run
```
"""

REQUIREMENTS = """\
flask>=3.0
python-dotenv>=1.0
requests>=2.31
{% if "tests" in features %}
pytest>=8.0
{% endif %}
"""

ENV_EXAMPLE = """\
FHIR_SERVER_URL={{ server_url }}
"""

CONFIG_PY = """\
import os

from dotenv import load_dotenv

load_dotenv()

FHIR_SERVER_URL = os.environ.get("FHIR_SERVER_URL", {{ server_url | tojson }}).rstrip("/")
FHIR_VERSION = {{ fhir_version | tojson }}
REQUEST_TIMEOUT = float(os.environ.get("FHIR_TIMEOUT", "10"))
"""

FHIR_CLIENT_PY = """\
import requests

from config import FHIR_SERVER_URL, REQUEST_TIMEOUT

HEADERS = {"Accept": "application/fhir+json", "Content-Type": "application/fhir+json"}


def request(method, path, **kwargs):
    response = requests.request(
        method,
        f"{FHIR_SERVER_URL}/{path}",
        headers=HEADERS,
        timeout=REQUEST_TIMEOUT,
        **kwargs,
    )
    response.raise_for_status()
    return response.json() if response.content else None
"""

APP_PY = """\
from flask import Flask, jsonify

from config import FHIR_SERVER_URL
{% for resource in resources %}
from resources.{{ resource | snake }} import blueprint as {{ resource | snake }}_blueprint
{% endfor %}


def create_app():
    app = Flask(__name__)
{% for resource in resources %}
    app.register_blueprint({{ resource | snake }}_blueprint, url_prefix="/api/{{ resource | kebab }}")
{% endfor %}

    @app.get("/health")
    def health():
        return jsonify(status="ok", fhir_server_url=FHIR_SERVER_URL)

    return app


app = create_app()
"""

RESOURCES_INIT = """\
"""

RESOURCE_PY = """\
from flask import Blueprint, jsonify, request

import fhir_client

RESOURCE_TYPE = "{{ resource }}"
SEARCH_PARAMS = {{ search_parameters.get(resource, []) | tojson }}

blueprint = Blueprint("{{ resource | snake }}", __name__)
{% set ops = interactions.get(resource, []) %}
{% if "search-type" in ops or not ops %}


@blueprint.get("/")
def search():
    params = {k: v for k, v in request.args.items() if k in SEARCH_PARAMS}
    return jsonify(fhir_client.request("GET", RESOURCE_TYPE, params=params))
{% endif %}
{% if "read" in ops or not ops %}


@blueprint.get("/<resource_id>")
def read(resource_id):
    return jsonify(fhir_client.request("GET", f"{RESOURCE_TYPE}/{resource_id}"))
{% endif %}
{% if "create" in ops %}


@blueprint.post("/")
def create():
    body = dict(request.get_json(force=True), resourceType=RESOURCE_TYPE)
    return jsonify(fhir_client.request("POST", RESOURCE_TYPE, json=body)), 201
{% endif %}
{% if "update" in ops %}


@blueprint.put("/<resource_id>")
def update(resource_id):
    body = dict(request.get_json(force=True), resourceType=RESOURCE_TYPE, id=resource_id)
    return jsonify(fhir_client.request("PUT", f"{RESOURCE_TYPE}/{resource_id}", json=body))
{% endif %}
{% if "delete" in ops %}


@blueprint.delete("/<resource_id>")
def delete(resource_id):
    fhir_client.request("DELETE", f"{RESOURCE_TYPE}/{resource_id}")
    return "", 204
{% endif %}
"""

DOCKERFILE = """\
FROM python:3.12-slim
WORKDIR /app
COPY requirements.txt .
RUN pip install --no-cache-dir -r requirements.txt
COPY . .
ENV FHIR_SERVER_URL={{ server_url }}
EXPOSE 5000
CMD ["flask", "--app", "app", "run", "--host", "0.0.0.0"]
"""

TEST_APP_PY = """\
from app import create_app


def test_health():
    client = create_app().test_client()
    response = client.get("/health")
    assert response.status_code == 200
"""

TEMPLATE_SET = TemplateSet(
    name="python_flask",
    description="Python Flask API using requests",
    files={
        "README.md": README,
        "requirements.txt": REQUIREMENTS,
        ".env.example": ENV_EXAMPLE,
        "config.py": CONFIG_PY,
        "fhir_client.py": FHIR_CLIENT_PY,
        "app.py": APP_PY,
        "resources/__init__.py": RESOURCES_INIT,
    },
    per_resource={
        "resources/{{ resource | snake }}.py": RESOURCE_PY,
    },
    feature_files={
        "docker": {"Dockerfile": DOCKERFILE},
        "tests": {"tests/test_app.py": TEST_APP_PY},
    },
)
