"""
Main Controller to integrate all modules
Provides a unified interface to register all module blueprints
"""
import logging

from flask import Flask
from modules.lpn_lock.routes import lpn_lock_bp
from modules.usage_stats.routes import usage_stats_bp


def register_modules(app: Flask):
    """Register all module blueprints with the Flask app"""

    # LPN lock/unlock command endpoint
    app.register_blueprint(lpn_lock_bp)

    # Deployment stats and analytics client config
    app.register_blueprint(usage_stats_bp)

    logging.info("✅ All modules registered successfully")
    for info in get_module_info().values():
        logging.info(f"   - {info['name']}: {', '.join(info['routes'])}")


def get_module_info():
    """Get information about available modules"""
    return {
        'lpn_lock': {
            'name': 'LPN Lock/Unlock',
            'prefix': '/api',
            'description': 'Apply or remove Manhattan condition codes on LPNs in bulk',
            'actions': ['app_opened', 'ha-track', 'auth', 'get-codes', 'lock', 'unlock'],
            'routes': ['/api/validate']
        },
        'usage_stats': {
            'name': 'Usage Stats',
            'prefix': '/api',
            'description': 'Deployment metadata and analytics client configuration',
            'actions': [],
            'routes': ['/api/stats', '/api/statsig-config']
        }
    }
