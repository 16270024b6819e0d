# Copyright 2016 Huawei Technologies Co.,LTD.
# All Rights Reserved.
#
#    Licensed under the Apache License, Version 2.0 (the "License"); you may
#    not use this file except in compliance with the License. You may obtain
#    a copy of the License at
#
#         http://www.apache.org/licenses/LICENSE-2.0
#
#    Unless required by applicable law or agreed to in writing, software
#    distributed under the License is distributed on an "AS IS" BASIS, WITHOUT
#    WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied. See the
#    License for the specific language governing permissions and limitations
#    under the License.

"""Thin client for the Azure Service Management XML/REST API."""

import contextlib
import threading
from xml.etree import ElementTree

import defusedxml
from defusedxml import ElementTree as SafeElementTree
from keystoneauth1 import exceptions as ks_exc
from keystoneauth1 import loading as ks_loading
from oslo_log import log as logging

from cirrus.common import exception
from cirrus.conf import CONF

LOG = logging.getLogger(__name__)

NAMESPACE = 'http://schemas.microsoft.com/windowsazure'
XSI_NAMESPACE = 'http://www.w3.org/2001/XMLSchema-instance'
XML_CONTENT_TYPE = 'application/xml;charset=utf-8'

_CLIENT = None
_CLIENT_LOCK = threading.Lock()

_code_map = {
    401: exception.NotAuthorized,
    403: exception.NotAuthorized,
    404: exception.NotFound,
    409: exception.Conflict,
    503: exception.TemporaryFailure,
}


def get_client():
    """Return the process wide Azure client, creating it on first use."""
    global _CLIENT
    with _CLIENT_LOCK:
        if _CLIENT is None:
            _CLIENT = AzureClient()
        return _CLIENT


def local_name(tag):
    """Strip the ``{namespace}`` prefix ElementTree puts on tag names."""
    return tag.rsplit('}', 1)[-1]


def find_elements(root, name):
    """All elements below (and including) root with the given local name."""
    return [element for element in root.iter()
            if local_name(element.tag) == name]


def child_values(element):
    """Map lower-cased child names to their stripped text.

    Children without any text are left out.
    """
    values = {}
    for child in element:
        if child.text is None:
            continue
        values[local_name(child.tag).lower()] = child.text.strip()
    return values


def new_document(root_name):
    root = ElementTree.Element(root_name)
    root.set('xmlns', NAMESPACE)
    root.set('xmlns:i', XSI_NAMESPACE)
    return root


def add_value(parent, name, value):
    ElementTree.SubElement(parent, name).text = value


def to_xml(root):
    return ElementTree.tostring(root, encoding='unicode')


def parse_xml(text):
    """Parse an untrusted response body, returning None if it is unusable."""
    if not text or not text.strip():
        return None
    try:
        return SafeElementTree.fromstring(text)
    except (SafeElementTree.ParseError, defusedxml.DefusedXmlException) as e:
        LOG.warning("Unable to parse XML returned by Azure: %s", e)
        return None


def from_response(response, method, url):
    """Returns an instance of :class:`CirrusException` for an HTTP error.

    :param response: instance of `requests.Response` class
    :param method: HTTP method used for request
    :param url: URL used for request
    """
    status = response.status_code
    error_code = ''
    details = response.text or ''
    root = parse_xml(response.text)
    if root is not None and local_name(root.tag) == 'Error':
        values = child_values(root)
        error_code = values.get('code', '')
        details = values.get('message', details)

    kwargs = {'status': status,
              'method': method,
              'url': url,
              'error_code': error_code,
              'details': details}
    message = exception.AzureAPIError._msg_fmt % kwargs

    cls = _code_map.get(status)
    if cls is None:
        return exception.AzureAPIError(code=status, **kwargs)
    return cls(message=message, code=status)


class AzureClient(object):
    """Issues signed requests against one Azure Service Management endpoint.

    Management certificate, CA and timeout settings come from the
    ``[azure]`` keystoneauth session options. The underlying session is
    shared by all callers and reference counted through :meth:`hold`.
    """

    def __init__(self):
        self._session = None
        self._refs = 0
        self._closing = False
        self._lock = threading.Lock()

    @property
    def session(self):
        with self._lock:
            if self._session is None:
                self._session = ks_loading.load_session_from_conf_options(
                    CONF, 'azure')
                self._closing = False
            return self._session

    @property
    def active_holds(self):
        return self._refs

    @contextlib.contextmanager
    def hold(self):
        """Keep the session open for the duration of the block.

        The hold is released on every way out of the block, including
        exceptions raised while the block is still setting up.
        """
        with self._lock:
            self._refs += 1
        try:
            yield self
        finally:
            session = None
            with self._lock:
                self._refs -= 1
                if self._closing and self._refs == 0:
                    session = self._detach_session()
            self._close_session(session)

    def close(self):
        """Close the session now, or once the last hold is released."""
        session = None
        with self._lock:
            self._closing = True
            if self._refs == 0:
                session = self._detach_session()
        self._close_session(session)

    def _detach_session(self):
        # Caller holds self._lock. A hold taken after this point gets a
        # fresh session.
        session, self._session = self._session, None
        self._closing = False
        return session

    def _close_session(self, session):
        if session is not None:
            LOG.debug("Closing Azure management session")
            session.session.close()

    def _url(self, account, resource):
        if not account:
            raise exception.NoContext()
        return '%s/%s%s' % (CONF.azure.endpoint.rstrip('/'), account,
                            resource)

    def invoke(self, method, account, resource, body=None):
        """Send one request and return the response.

        :param method: HTTP method.
        :param account: the subscription id the resource lives under.
        :param resource: path below the subscription, starting with '/'.
        :param body: optional XML document as text.
        :raises: AzureConnectionFailed if the endpoint cannot be reached,
                 a :func:`from_response` exception for any 4xx/5xx answer.
        """
        url = self._url(account, resource)
        headers = {'x-ms-version': CONF.azure.api_version}
        kwargs = {}
        if body is not None:
            headers['Content-Type'] = XML_CONTENT_TYPE
            kwargs['data'] = body.encode('utf-8')

        LOG.debug("Azure request: %(method)s %(url)s",
                  {'method': method, 'url': url})
        try:
            resp = self.session.request(url, method,
                                        headers=headers,
                                        authenticated=False,
                                        raise_exc=False,
                                        **kwargs)
        except ks_exc.ConnectionError as e:
            raise exception.AzureConnectionFailed(
                server=CONF.azure.endpoint, reason=str(e))

        if resp.status_code >= 400:
            LOG.debug("Azure request %(method)s %(url)s failed with "
                      "%(status)s", {'method': method, 'url': url,
                                     'status': resp.status_code})
            raise from_response(resp, method, url)
        return resp

    def get_as_xml(self, account, resource):
        """GET a resource and return its parsed document.

        :returns: the root element, or None when the resource does not
                  exist or its body is empty or not XML.
        """
        try:
            resp = self.invoke('GET', account, resource)
        except exception.NotFound:
            LOG.debug("Azure resource %s does not exist", resource)
            return None
        return parse_xml(resp.text)

    def post(self, account, resource, body):
        """POST an XML body and return the Azure request id."""
        resp = self.invoke('POST', account, resource, body)
        return resp.headers.get('x-ms-request-id')

    def delete(self, account, resource, body=None):
        resp = self.invoke('DELETE', account, resource, body)
        return resp.headers.get('x-ms-request-id')
