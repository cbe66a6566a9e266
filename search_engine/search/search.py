"""
Web interface for the search engine.
Serves a search page and a JSON search API over the in-memory index.
"""
from datetime import datetime
import logging
import threading

from flask import Flask, jsonify, redirect, render_template_string, request, url_for

from search_engine.common.config import SERVER_TITLE
from search_engine.common.text_processor import new_stemmer, unique_stems

logger = logging.getLogger(__name__)

SEARCH_HTML = """
<!DOCTYPE html>
<html>
<head>
    <title>{{ title }}</title>
    <meta name="viewport" content="width=device-width, initial-scale=1">
    <style>
        body { font-family: Arial, sans-serif; margin: 0; padding: 0; background-color: #f5f5f5; }
        .container { max-width: 800px; margin: 0 auto; padding: 20px; }
        h1 { text-align: center; color: #333; }
        .result-url a { color: #1a0dab; }
        .history { color: #545454; font-size: 14px; }
        .timestamp { color: #888; font-size: 12px; text-align: right; }
    </style>
</head>
<body>
    <div class="container">
        <h1>{{ title }}</h1>
        <form method="POST" action="{{ action }}">
            <input type="text" name="query" placeholder="Enter your search query...">
            <label><input type="checkbox" name="exact"> Exact</label>
            <label><input type="checkbox" name="clear"> Clear history</label>
            <button type="submit">Search</button>
        </form>
        <div id="results-container">
        {% for where in results %}
            <p class="result-url"><a href="{{ where }}">{{ where }}</a></p>
        {% endfor %}
        </div>
        <h2>History</h2>
        <div class="history">
        {% for query in history %}
            <p>{{ query }}</p>
        {% endfor %}
        </div>
        <p class="timestamp">Updated {{ timestamp }}</p>
    </div>
</body>
</html>
"""


def get_date():
    """Format the current time like '03:15 PM on Monday, March 02 2026'."""
    return datetime.now().strftime("%I:%M %p on %A, %B %d %Y")


def create_app(index):
    """
    Create the Flask application for an index.

    Args:
        index: A ThreadSafeInvertedIndex shared with the rest of the program

    Returns:
        Flask application with the search page and the JSON API
    """
    app = Flask(__name__)

    # Shared by every request handler thread
    lock = threading.Lock()
    history = []
    output = []

    def run_search(query, exact):
        stems = unique_stems(query, new_stemmer())
        return index.search(stems, exact)

    @app.route('/', methods=['GET'])
    def home():
        """Render the search page with the results of the last search."""
        with lock:
            results = list(output)
            queries = list(history)
            output.clear()

        return render_template_string(
            SEARCH_HTML,
            title=SERVER_TITLE,
            action=url_for('home'),
            results=results,
            history=queries,
            timestamp=get_date()
        )

    @app.route('/', methods=['POST'])
    def search_form():
        """Run a search from the form, then redirect back to the page."""
        query = request.form.get('query', '')
        exact = 'exact' in request.form

        results = run_search(query, exact)
        logger.info(f"Web search for '{query}' returned {len(results)} results")

        with lock:
            if 'clear' in request.form:
                history.clear()
            else:
                history.append(query)
            output.clear()
            output.extend(result.where for result in results)

        return redirect(url_for('home'))

    @app.route('/api/search', methods=['POST'])
    def search_api():
        """API endpoint for search."""
        data = request.get_json(silent=True) or {}
        query = data.get('query', '')
        exact = bool(data.get('exact', False))
        max_results = data.get('max_results')

        if not query:
            return jsonify({'error': 'No query provided'}), 400

        results = run_search(query, exact)
        if isinstance(max_results, int) and max_results >= 0:
            results = results[:max_results]

        response = {
            'query': query,
            'results': [result.to_dict() for result in results],
            'result_count': len(results),
            'timestamp': datetime.now().isoformat()
        }
        return jsonify(response)

    return app


def start_web_interface(index, port):
    """Start the web interface and block until it is stopped."""
    app = create_app(index)
    logger.info(f"Starting web interface on http://localhost:{port}")
    print(f"Starting web interface on http://localhost:{port}")
    app.run(host='0.0.0.0', port=port, threaded=True)
