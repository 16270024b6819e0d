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

"""Cirrus base exception handling.

Every error raised by the adapter derives from :class:`CirrusException`,
which formats ``_msg_fmt`` with the constructor keyword arguments and
carries an HTTP-style ``code``.
"""

from http import client as http_client

from oslo_log import log as logging

from cirrus.common.i18n import _
from cirrus.conf import CONF

LOG = logging.getLogger(__name__)


class CirrusException(Exception):
    """Base Cirrus Exception

    To correctly use this class, inherit from it and define
    a '_msg_fmt' property. That message will get printf'd
    with the keyword arguments provided to the constructor.

    If you need to access the message from an exception you should use
    str(exc)

    """
    _msg_fmt = _("An unknown exception occurred.")
    code = http_client.INTERNAL_SERVER_ERROR
    error_type = 'general'
    headers = {}
    safe = False

    def __init__(self, message=None, **kwargs):
        self.kwargs = kwargs

        if 'code' not in self.kwargs:
            try:
                self.kwargs['code'] = self.code
            except AttributeError:
                pass

        if not message:
            try:
                message = self._msg_fmt % kwargs

            except Exception:
                # kwargs doesn't match a variable in self._msg_fmt
                # log the issue and the kwargs
                LOG.exception('Exception in string format operation')
                for name, value in kwargs.items():
                    LOG.error("%s: %s", name, value)

                if CONF.fatal_exception_format_errors:
                    raise
                else:
                    # at least get the core self._msg_fmt out if something
                    # happened
                    message = self._msg_fmt

        super(CirrusException, self).__init__(message)

    def __str__(self):
        return self.args[0]

    def format_message(self):
        return str(self)


class NotAuthorized(CirrusException):
    _msg_fmt = _("Not authorized.")
    code = http_client.FORBIDDEN
    error_type = 'authentication'


class ImageCatalogAccessDenied(NotAuthorized):
    """The image catalog came back empty or unreadable.

    Raised for every failure to obtain a catalog document, whatever the
    underlying cause was.
    """
    _msg_fmt = _("Illegal access to requested resource: %(resource)s")


class NotFound(CirrusException):
    _msg_fmt = _("Resource could not be found.")
    code = http_client.NOT_FOUND


class ImageNotFound(NotFound):
    _msg_fmt = _("No such machine image: %(image)s")


class ServerNotFound(NotFound):
    _msg_fmt = _("No such virtual machine: %(server)s")


class Invalid(CirrusException):
    _msg_fmt = _("Unacceptable parameters.")
    code = http_client.BAD_REQUEST


class InvalidServerState(Invalid):
    _msg_fmt = _("The server must be paused in order to create an image. "
                 "Server %(server)s is %(state)s.")
    code = http_client.CONFLICT


class Conflict(CirrusException):
    _msg_fmt = _('Conflict.')
    code = http_client.CONFLICT


class TemporaryFailure(CirrusException):
    _msg_fmt = _("Resource temporarily unavailable, please retry.")
    code = http_client.SERVICE_UNAVAILABLE


class ConfigInvalid(CirrusException):
    _msg_fmt = _("Invalid configuration file. %(error_msg)s")
    error_type = 'configuration'


class NoContext(ConfigInvalid):
    _msg_fmt = _("No context was specified for this request")


class OperationNotSupported(CirrusException):
    _msg_fmt = _("%(operation)s is not supported for Azure OS images.")
    code = http_client.NOT_IMPLEMENTED


class InternalError(CirrusException):
    _msg_fmt = _("Internal error: %(reason)s")


class AzureConnectionFailed(CirrusException):
    _msg_fmt = _("Connection to the Azure endpoint %(server)s failed: "
                 "%(reason)s")
    code = http_client.SERVICE_UNAVAILABLE


class AzureAPIError(CirrusException):
    _msg_fmt = _("Azure returned %(status)s for %(method)s %(url)s: "
                 "%(error_code)s %(details)s")


class CaptureCancelled(CirrusException):
    _msg_fmt = _("Capture of %(server)s to image %(name)s was cancelled.")


class CaptureTimeout(CirrusException):
    _msg_fmt = _("Capture of %(server)s to image %(name)s did not start "
                 "within %(timeout)s seconds.")
    code = http_client.REQUEST_TIMEOUT
