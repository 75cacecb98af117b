from flask import Blueprint, current_app, jsonify

main = Blueprint('main', __name__)

WELCOME_PAGE = """<!DOCTYPE html>
<html>
  <head>
    <title>Welcome Event</title>
    <style>
      body {
        display: flex;
        justify-content: center;
        align-items: center;
        height: 100vh;
        margin: 0;
        background-color: rgb(126, 56, 56);
        font-family: Arial, sans-serif;
      }
      h1 {
        font-size: 3rem;
        color: #333;
      }
    </style>
  </head>
  <body>
    <h1>Welcome Service Event Infinix</h1>
  </body>
</html>
"""


@main.route('/')
def index():
    return WELCOME_PAGE


@main.route('/health')
def health():
    services = current_app.extensions['scanrelay']
    return jsonify({'status': 'ok', 'sessions': len(services.store)})
