"""
Manhattan WMS REST integration
OAuth token exchange plus the inventory and container-condition calls
used to lock and unlock LPNs.
"""
import requests
import logging
import os
import urllib3

logger = logging.getLogger('manhattan_integration')

FACILITY_SUFFIX = '-DM1'
CONDITION_CODE_PAGE_SIZE = 50

INVENTORY_SEARCH_PATH = '/dcinventory/api/dcinventory/inventory/search'
CONDITION_SEARCH_PATH = '/dcinventory/api/dcinventory/containerCondition/search'
CONDITION_SAVE_PATH = '/dcinventory/api/dcinventory/containerCondition/save'
CONDITION_DELETE_PATH = '/dcinventory/api/dcinventory/containerCondition/deleteContainerConditions'
CONDITION_CODE_PATH = '/dcinventory/api/dcinventory/conditionCode'


def facility_id(org):
    """WMS facility / location code for an organization"""
    return f"{org}{FACILITY_SUFFIX}"


def _as_dict(payload):
    return payload if isinstance(payload, dict) else {}


class ManhattanIntegration:

    def __init__(self):
        # Read on every instantiation so credentials loaded at startup are picked up
        self.auth_host = os.environ.get('MANHATTAN_AUTH_HOST') or 'salep-auth.sce.manh.com'
        self.api_host = os.environ.get('MANHATTAN_API_HOST') or 'salep.sce.manh.com'
        self.client_id = os.environ.get('MANHATTAN_CLIENT_ID') or 'omnicomponent.1.0.0'
        self.client_secret = os.environ.get('MANHATTAN_SECRET', '')
        self.password = os.environ.get('MANHATTAN_PASSWORD', '')
        self.username_base = os.environ.get('MANHATTAN_USERNAME_BASE') or 'sdtadmin@'
        self.timeout = float(os.environ.get('MANHATTAN_TIMEOUT') or 30)
        self.session = requests.Session()
        self.session.verify = os.environ.get('MANHATTAN_VERIFY_SSL', 'true').lower() != 'false'
        if not self.session.verify:
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

    def is_configured(self):
        return all([self.auth_host, self.api_host, self.client_id, self.client_secret, self.password])

    def username_for(self, org):
        return f"{self.username_base}{org.lower()}"

    def get_token(self, org):
        """Exchange the org's service-account credentials for a bearer token.

        Returns the access token, or None when the exchange fails for any reason.
        """
        if not self.is_configured():
            logger.warning("⚠️ Manhattan configuration incomplete. Please check environment variables.")
            logger.warning(f"   MANHATTAN_SECRET: {'✓' if self.client_secret else '✗'}")
            logger.warning(f"   MANHATTAN_PASSWORD: {'✓' if self.password else '✗'}")
            return None

        url = f"https://{self.auth_host}/oauth/token"
        data = {
            'grant_type': 'password',
            'username': self.username_for(org),
            'password': self.password
        }

        try:
            logger.info(f"🔐 Requesting Manhattan token for org {org}")
            response = self.session.post(url,
                                         data=data,
                                         auth=(self.client_id, self.client_secret),
                                         timeout=self.timeout)
            if not response.ok:
                logger.warning(f"❌ Manhattan auth failed (Status {response.status_code}): {response.text}")
                return None
            token = _as_dict(response.json()).get('access_token')
            if token:
                logger.info(f"✅ Manhattan auth successful for org {org}")
            return token
        except requests.exceptions.RequestException as e:
            logger.error(f"❌ Manhattan auth error: {str(e)}")
            return None
        except ValueError as e:
            logger.error(f"❌ Manhattan auth returned invalid JSON: {str(e)}")
            return None

    def _headers(self, token, org):
        return {
            'Authorization': f'Bearer {token}',
            'Content-Type': 'application/json',
            'selectedOrganization': org,
            'selectedLocation': facility_id(org)
        }

    def api_call(self, method, path, token, org, body=None):
        """Call the WMS API scoped to org.

        Returns the decoded JSON on a 2xx response, otherwise a failure payload
        {'success': False, 'error': <raw response body or error text>}.
        """
        url = f"https://{self.api_host}{path}"
        try:
            response = self.session.request(method,
                                            url,
                                            headers=self._headers(token, org),
                                            json=body,
                                            timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.error(f"❌ Manhattan {method} {path} failed: {str(e)}")
            return {'success': False, 'error': str(e)}

        if not response.ok:
            logger.warning(f"❌ Manhattan {method} {path} returned {response.status_code}: {response.text}")
            return {'success': False, 'error': response.text}

        try:
            return response.json()
        except ValueError:
            logger.warning(f"Manhattan {method} {path} returned a non-JSON body")
            return {'success': False, 'error': response.text}

    def search_inventory(self, token, org, lpn):
        """True when the WMS reports at least one container with this exact LPN id"""
        result = self.api_call('POST', INVENTORY_SEARCH_PATH, token, org, {
            'Query': f"InventoryContainerId = '{lpn}'",
            'Size': 1,
            'Page': 0
        })
        if _as_dict(result).get('success') is False:
            # Reported upstream as a missing LPN
            logger.warning(f"⚠️ Inventory search for LPN {lpn} ({org}) failed: {result.get('error')}")
        header = _as_dict(_as_dict(result).get('header'))
        try:
            return int(header.get('totalCount') or 0) > 0
        except (TypeError, ValueError):
            return False

    def search_conditions(self, token, org, lpn):
        """Condition codes currently attached to an ILPN"""
        result = self.api_call('POST', CONDITION_SEARCH_PATH, token, org, {
            'Query': f"InventoryContainerId = {lpn} and InventoryContainerTypeId = ILPN",
            'Page': 0
        })
        return [item.get('ConditionCode') for item in (_as_dict(result).get('data') or []) if isinstance(item, dict)]

    def _condition_body(self, org, lpn, code):
        user = self.username_for(org)
        return {
            'InventoryContainerTypeId': 'ILPN',
            'CreatedBy': user,
            'ConditionCode': code,
            'OrgId': org,
            'FacilityId': facility_id(org),
            'UpdatedBy': user,
            'InventoryContainerId': lpn
        }

    def save_condition(self, token, org, lpn, code):
        logger.info(f"🔒 Saving condition {code} on LPN {lpn} ({org})")
        return self.api_call('POST', CONDITION_SAVE_PATH, token, org,
                             self._condition_body(org, lpn, code))

    def delete_condition(self, token, org, lpn, code):
        logger.info(f"🔓 Deleting condition {code} from LPN {lpn} ({org})")
        return self.api_call('POST', CONDITION_DELETE_PATH, token, org,
                             self._condition_body(org, lpn, code))

    def list_condition_codes(self, token, org):
        """Condition codes for dropdown selection, sorted by code.

        The first entry is always the empty 'Select Code' placeholder.
        """
        result = self.api_call('GET',
                               f"{CONDITION_CODE_PATH}?size={CONDITION_CODE_PAGE_SIZE}",
                               token, org)
        codes = [{
            'code': item.get('ConditionCodeId') or '',
            'desc': item.get('Description') or ''
        } for item in (_as_dict(result).get('data') or []) if isinstance(item, dict)]
        codes.sort(key=lambda c: c['code'])
        logger.info(f"📋 Loaded {len(codes)} condition codes for org {org}")
        return [{'code': '', 'desc': 'Select Code'}] + codes
