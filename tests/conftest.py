"""Shared test fixtures for CodeForge."""

from __future__ import annotations

import pytest

from codeforge.compiler.pipeline import AssemblyPipeline
from codeforge.service.project_store import ProjectStore
from codeforge.service.session_manager import SessionManager


@pytest.fixture
def pipeline() -> AssemblyPipeline:
    return AssemblyPipeline()


@pytest.fixture
def store() -> ProjectStore:
    return ProjectStore()


@pytest.fixture
def session_manager() -> SessionManager:
    """SessionManager with long TTL and no cleanup thread (for tests)."""
    return SessionManager(ttl_seconds=3600, cleanup_interval=9999)


REACT_OUTPUT = """\
Here is a small counter app.

1. `index.html` hosts the root element.
2. `App.jsx` holds the state.

***FILE_START: index.html***
<!DOCTYPE html>
<html>
<head>
  <title>Counter</title>
</head>
<body>
  <div id="root"></div>
</body>
</html>
***FILE_END***

***FILE_START: src/index.jsx***
import React from 'react';
import ReactDOM from 'react-dom/client';
import App from './App';

ReactDOM.createRoot(document.getElementById('root')).render(<App />);
***FILE_END***

***FILE_START: src/App.jsx***
```jsx
import React, { useState } from 'react';
import Button from './components/Button';

export default function App() {
  const [count, setCount] = useState(0);
  return <Button onClick={() => setCount(count + 1)}>Clicked {count}</Button>;
}
```
***FILE_END***

***FILE_START: src/components/Button.jsx***
import React from 'react';

export default function Button({ children, onClick }) {
  return <button onClick={onClick}>{children}</button>;
}
***FILE_END***

***FILE_START: src/styles.css***
button { padding: 8px; }
***FILE_END***

Run it and click the button.
"""

CPP_OUTPUT = """\
Reads a number and prints its square.

***FILE_START: main.cpp***
#include <iostream>
using namespace std;

int main() {
    int n;
    cin >> n;
    cout << "Square: " << n * n << endl;
    return 0;
}
***FILE_END***
"""

LIQUID_SECTION = """\
<div class="hero">
  {% if section.settings.show_title %}
  <h1>{{ section.settings.title }}</h1>
  {% endif %}
  <img src="{{ section.settings.image | img_url: '600x' }}">
  <img src="{{ product.featured_image | img_url: 'large' }}">
  {% for tag in product.tags %}<span>{{ tag }}</span>{% endfor %}
  <p>{{ product.title }}</p>
</div>
{% stylesheet %}
.hero { color: #333; }
{% endstylesheet %}
{% javascript %}
console.log('hero loaded');
{% endjavascript %}
{% schema %}
{"name": "Hero", "settings": [{"type": "text", "id": "title"}]}
{% endschema %}
"""
