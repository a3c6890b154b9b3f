"""
Next.js scaffold using the fhirclient library.
"""

from fhir_builder.scaffold.stacks import TemplateSet

README = """\
# {{ app_name }}

{{ description or "Next.js FHIR viewer for " ~ server_url }}

Built with Next.js and [fhirclient](https://github.com/smart-on-fhir/client-js)
against a FHIR {{ fhir_version }} server.

Pages:
{% for resource in resources %}
- `/{{ resource | kebab }}` lists {{ resource }} resources
{% endfor %}

```bash
cp .env.example .env.local
npm install
npm run dev
```
"""

PACKAGE_JSON = """\
{
  "name": "{{ app_slug }}",
  "version": "0.1.0",
  "private": true,
  "scripts": {
    "dev": "next dev",
    "build": "next build",
    "start": "next start"{% if "tests" in features %},
    "test": "node --test tests/"{% endif %}

  },
  "dependencies": {
    "fhirclient": "^2.5.4",
    "next": "^14.2.5",
    "react": "^18.3.1",
    "react-dom": "^18.3.1"
  }
}
"""

ENV_EXAMPLE = """\
NEXT_PUBLIC_FHIR_SERVER_URL={{ server_url }}
"""

FHIR_LIB = """\
import FHIR from 'fhirclient';

export const FHIR_SERVER_URL =
  process.env.NEXT_PUBLIC_FHIR_SERVER_URL || {{ server_url | tojson }};

export const SEARCH_PARAMETERS = {{ search_parameters | tojson }};

export function getClient() {
  return FHIR.client({ serverUrl: FHIR_SERVER_URL });
}

export async function searchResources(resourceType, params = {}) {
  const query = new URLSearchParams(params).toString();
  const bundle = await getClient().request(query ? `${resourceType}?${query}` : resourceType);
  return (bundle.entry || []).map((entry) => entry.resource);
}
"""

INDEX_PAGE = """\
import Link from 'next/link';

const RESOURCES = {{ resources | tojson }};

export default function Home() {
  return (
    <main>
      <h1>{{ app_name }}</h1>
      <ul>
        {RESOURCES.map((resource) => (
          <li key={resource}>
            <Link href={'/' + resource.replace(/([a-z])([A-Z])/g, '$1-$2').toLowerCase()}>{resource}</Link>
          </li>
        ))}
      </ul>
    </main>
  );
}
"""

RESOURCE_PAGE = """\
import { useEffect, useState } from 'react';
import { searchResources } from '../lib/fhir';

export default function {{ resource }}Page() {
  const [items, setItems] = useState([]);
  const [error, setError] = useState(null);

  useEffect(() => {
    searchResources('{{ resource }}', { _count: 20 })
      .then(setItems)
      .catch((err) => setError(err.message));
  }, []);

  return (
    <main>
      <h1>{{ resource }}</h1>
      {% if search_parameters.get(resource) %}
      <p>Searchable by: {{ search_parameters[resource] | join(", ") }}</p>
      {% endif %}
      {error && <p role="alert">{error}</p>}
      <ul>
        {items.map((item) => (
          <li key={item.id}>{item.id}</li>
        ))}
      </ul>
    </main>
  );
}
"""

DOCKERFILE = """\
FROM node:20-alpine
WORKDIR /app
COPY . .
RUN npm install && npm run build
ENV NEXT_PUBLIC_FHIR_SERVER_URL={{ server_url }}
EXPOSE 3000
CMD ["npm", "start"]
"""

SMOKE_TEST_JS = """\
const test = require('node:test');
const assert = require('node:assert');

test('declares the configured resources', () => {
  const resources = {{ resources | tojson }};
  assert.strictEqual(resources.length, {{ resources | length }});
});
"""

TEMPLATE_SET = TemplateSet(
    name="next_fhir",
    description="Next.js application using fhirclient",
    files={
        "README.md": README,
        "package.json": PACKAGE_JSON,
        ".env.example": ENV_EXAMPLE,
        "lib/fhir.js": FHIR_LIB,
        "pages/index.js": INDEX_PAGE,
    },
    per_resource={
        "pages/{{ resource | kebab }}.js": RESOURCE_PAGE,
    },
    feature_files={
        "docker": {"Dockerfile": DOCKERFILE},
        "tests": {"tests/resources.test.js": SMOKE_TEST_JS},
    },
)
