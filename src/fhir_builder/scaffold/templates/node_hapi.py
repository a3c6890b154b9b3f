"""
Node + Express scaffold using fhir-kit-client.
"""

from fhir_builder.scaffold.stacks import TemplateSet

README = """\
# {{ app_name }}

{{ description or "FHIR application scaffold generated for " ~ server_url }}

Node.js + Express service that proxies a FHIR {{ fhir_version }} server using
[fhir-kit-client](https://github.com/Vermonster/fhir-kit-client).

## Resources

| Resource | Interactions | Search parameters |
|----------|--------------|-------------------|
{% for resource in resources %}
| {{ resource }} | {{ interactions.get(resource, []) | join(", ") or "-" }} | {{ search_parameters.get(resource, []) | join(", ") or "-" }} |
{% endfor %}

## Getting started

```bash
cp .env.example .env
npm install
npm start
```

The API listens on http://localhost:3000 and exposes
{% for resource in resources %}
`/api/{{ resource | kebab }}`{{ "," if not loop.last else "." }}
{% endfor %}
"""

PACKAGE_JSON = """\
{
  "name": "{{ app_slug }}",
  "version": "0.1.0",
  "private": true,
  "description": {{ (description or app_name) | tojson }},
  "main": "src/server.js",
  "scripts": {
    "start": "node src/server.js"{% if "tests" in features %},
    "test": "node --test test/"{% endif %}

  },
  "dependencies": {
    "dotenv": "^16.4.5",
    "express": "^4.19.2",
    "fhir-kit-client": "^1.9.2"
  }
}
"""

ENV_EXAMPLE = """\
FHIR_SERVER_URL={{ server_url }}
PORT=3000
"""

CONFIG_JS = """\
require('dotenv').config();

module.exports = {
  fhirServerUrl: process.env.FHIR_SERVER_URL || {{ server_url | tojson }},
  fhirVersion: {{ fhir_version | tojson }},
  port: parseInt(process.env.PORT || '3000', 10),
};
"""

FHIR_CLIENT_JS = """\
const Client = require('fhir-kit-client');
const config = require('./config');

const client = new Client({ baseUrl: config.fhirServerUrl });

module.exports = client;
"""

SERVER_JS = """\
const express = require('express');
const config = require('./config');

const app = express();
app.use(express.json());

{% for resource in resources %}
app.use('/api/{{ resource | kebab }}', require('./routes/{{ resource | kebab }}'));
{% endfor %}

app.get('/health', (req, res) => {
  res.json({ status: 'ok', fhirServerUrl: config.fhirServerUrl });
});

if (require.main === module) {
  app.listen(config.port, () => {
    console.log(`{{ app_name }} listening on port ${config.port}`);
  });
}

module.exports = app;
"""

ROUTE_JS = """\
const express = require('express');
const client = require('../fhirClient');

const router = express.Router();
const RESOURCE_TYPE = '{{ resource }}';
const SEARCH_PARAMS = {{ search_parameters.get(resource, []) | tojson }};

{% set ops = interactions.get(resource, []) %}
{% if "search-type" in ops or not ops %}
router.get('/', async (req, res, next) => {
  try {
    const searchParams = {};
    for (const name of SEARCH_PARAMS) {
      if (req.query[name] !== undefined) searchParams[name] = req.query[name];
    }
    const bundle = await client.search({ resourceType: RESOURCE_TYPE, searchParams });
    res.json(bundle);
  } catch (err) {
    next(err);
  }
});
{% endif %}
{% if "read" in ops or not ops %}

router.get('/:id', async (req, res, next) => {
  try {
    res.json(await client.read({ resourceType: RESOURCE_TYPE, id: req.params.id }));
  } catch (err) {
    next(err);
  }
});
{% endif %}
{% if "create" in ops %}

router.post('/', async (req, res, next) => {
  try {
    const body = { ...req.body, resourceType: RESOURCE_TYPE };
    res.status(201).json(await client.create({ resourceType: RESOURCE_TYPE, body }));
  } catch (err) {
    next(err);
  }
});
{% endif %}
{% if "update" in ops %}

router.put('/:id', async (req, res, next) => {
  try {
    const body = { ...req.body, resourceType: RESOURCE_TYPE, id: req.params.id };
    res.json(await client.update({ resourceType: RESOURCE_TYPE, id: req.params.id, body }));
  } catch (err) {
    next(err);
  }
});
{% endif %}
{% if "delete" in ops %}

router.delete('/:id', async (req, res, next) => {
  try {
    await client.delete({ resourceType: RESOURCE_TYPE, id: req.params.id });
    res.status(204).end();
  } catch (err) {
    next(err);
  }
});
{% endif %}

module.exports = router;
"""

DOCKERFILE = """\
FROM node:20-alpine
WORKDIR /app
COPY package.json ./
RUN npm install --omit=dev
COPY src ./src
ENV FHIR_SERVER_URL={{ server_url }}
EXPOSE 3000
CMD ["npm", "start"]
"""

DOCKERIGNORE = """\
node_modules
.env
"""

SMOKE_TEST_JS = """\
const test = require('node:test');
const assert = require('node:assert');
const config = require('../src/config');

test('targets the configured FHIR server', () => {
  assert.ok(config.fhirServerUrl.length > 0);
});
"""

TEMPLATE_SET = TemplateSet(
    name="node_hapi",
    description="Node.js + Express API using fhir-kit-client",
    files={
        "README.md": README,
        "package.json": PACKAGE_JSON,
        ".env.example": ENV_EXAMPLE,
        "src/config.js": CONFIG_JS,
        "src/fhirClient.js": FHIR_CLIENT_JS,
        "src/server.js": SERVER_JS,
    },
    per_resource={
        "src/routes/{{ resource | kebab }}.js": ROUTE_JS,
    },
    feature_files={
        "docker": {
            "Dockerfile": DOCKERFILE,
            ".dockerignore": DOCKERIGNORE,
        },
        "tests": {
            "test/config.test.js": SMOKE_TEST_JS,
        },
    },
)
