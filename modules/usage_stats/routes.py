"""
Usage Stats Module Routes
Deployment metadata from the Vercel API and the client analytics SDK key
"""
from flask import Blueprint, jsonify, request
from datetime import datetime, timezone
import logging
import os

import requests

usage_stats_bp = Blueprint('usage_stats', __name__, url_prefix='/api')

VERCEL_API_BASE = 'https://api.vercel.com'
PROJECT_NAME = 'lpn-unlock-app'
PROJECT_URL = 'https://lpnlock.vercel.app'
VERCEL_TIMEOUT = 30


def _vercel_get(path, token, params=None):
    return requests.get(f"{VERCEL_API_BASE}{path}",
                        headers={'Authorization': f'Bearer {token}'},
                        params=params,
                        timeout=VERCEL_TIMEOUT)


def get_project_info(token=None):
    """Project and latest production deployment, or {'error': ...}"""
    token = token or os.environ.get('VERCEL_API_TOKEN')
    if not token:
        return {'error': 'VERCEL_API_TOKEN environment variable not set'}

    try:
        projects_response = _vercel_get('/v9/projects', token)
        if not projects_response.ok:
            return {'error': f'Failed to fetch projects: {projects_response.status_code}'}

        projects = projects_response.json().get('projects') or []
        project = next((p for p in projects
                        if (p.get('name') or '').lower() == PROJECT_NAME.lower()), None)
        if not project:
            return {'error': f'Project {PROJECT_NAME} not found'}

        deployments_response = _vercel_get('/v6/deployments', token, params={
            'projectId': project['id'],
            'limit': 1,
            'target': 'production',
            'state': 'READY'
        })

        deployment = None
        if deployments_response.ok:
            deployments = deployments_response.json().get('deployments') or []
            deployment = deployments[0] if deployments else None

        return {
            'project': {
                'id': project['id'],
                'name': project.get('name'),
                'url': PROJECT_URL
            },
            'deployment': {
                'id': deployment.get('id'),
                'url': deployment.get('url'),
                'created': deployment.get('createdAt'),
                'state': deployment.get('state')
            } if deployment else None
        }
    except (requests.exceptions.RequestException, ValueError) as e:
        logging.error(f"❌ Vercel API error: {str(e)}")
        return {'error': f'API error: {str(e)}'}


@usage_stats_bp.route('/stats', methods=['GET', 'POST'])
def stats():
    if request.method != 'GET':
        return jsonify({'error': 'Method not allowed'}), 405

    response = {
        'project': PROJECT_NAME,
        'url': PROJECT_URL,
        'note': 'Analytics data (visitors, page views) is only available in the Vercel dashboard. '
                'This endpoint provides project metadata only.'
    }
    response.update(get_project_info())
    response['last_updated'] = datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z')
    return jsonify(response), 200


@usage_stats_bp.route('/statsig-config', methods=['GET', 'POST'])
def statsig_config():
    """Client SDK key for the browser analytics SDK"""
    if request.method != 'GET':
        return jsonify({'error': 'Method not allowed'}), 405

    client_key = os.environ.get('STATSIG_CLIENT_KEY') or os.environ.get('STATSIG_CLIENT_SDK_KEY')
    if not client_key:
        return jsonify({
            'key': None,
            'error': 'STATSIG_CLIENT_KEY environment variable not set.',
            'note': 'A Client SDK Key (starts with "client-") is required, not a Server Secret (starts with "secret-")'
        }), 200

    return jsonify({
        'key': client_key,
        'note': 'Client SDK Key retrieved successfully'
    }), 200
