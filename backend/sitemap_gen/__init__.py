from flask import Flask
from flask_cors import CORS
from .crawl.view.sitemap_view import bp as sitemap_bp


def create_app():
    app = Flask(__name__)
    CORS(app)  # Enable CORS for all routes

    app.register_blueprint(sitemap_bp)
    return app
