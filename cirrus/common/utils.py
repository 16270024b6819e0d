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

"""Utilities and helper functions."""

import base64

from oslo_log import log as logging
from oslo_utils import encodeutils

from cirrus.common import exception
from cirrus.common.i18n import _
from cirrus.objects import fields

LOG = logging.getLogger(__name__)

ROLE_SEPARATOR = ':'

# Checked in order, first hit wins. Distribution names come before the
# generic 'linux'/'unix' markers so that they are not shadowed.
_PLATFORM_KEYWORDS = (
    ('windows', fields.Platform.WINDOWS),
    ('centos', fields.Platform.CENT_OS),
    ('ubuntu', fields.Platform.UBUNTU),
    ('fedora', fields.Platform.FEDORA_CORE),
    ('red hat', fields.Platform.RHEL),
    ('redhat', fields.Platform.RHEL),
    ('rhel', fields.Platform.RHEL),
    ('debian', fields.Platform.DEBIAN),
    ('suse', fields.Platform.SUSE),
    ('coreos', fields.Platform.COREOS),
    ('freebsd', fields.Platform.FREE_BSD),
    ('solaris', fields.Platform.SOLARIS),
    ('linux', fields.Platform.UNIX),
    ('unix', fields.Platform.UNIX),
)


def guess_platform(text):
    """Guess a platform from free text such as an image name.

    :param text: text to scan, matched case-insensitively.
    :returns: one of the ``fields.Platform`` values, ``UNKNOWN`` when no
              keyword matches.
    """
    if not text:
        return fields.Platform.UNKNOWN
    text = text.lower()
    for keyword, platform in _PLATFORM_KEYWORDS:
        if keyword in text:
            return platform
    return fields.Platform.UNKNOWN


def split_server_id(server_id):
    """Split a ``service:role`` id into its service and role names.

    Ids that do not contain exactly one separator are used whole for both.
    """
    parts = server_id.split(ROLE_SEPARATOR)
    if len(parts) == 2:
        return parts[0], parts[1]
    LOG.debug("Server id %s is not of the form service:role, using it as "
              "both service and role name", server_id)
    return server_id, server_id


def encode_label(text):
    """Base64 encode text as UTF-8, the way Azure wants image labels."""
    try:
        raw = encodeutils.safe_encode(text, 'utf-8')
    except (TypeError, UnicodeError) as e:
        raise exception.InternalError(
            reason=_('unable to encode label %(text)r: %(err)s') %
            {'text': text, 'err': e})
    return base64.b64encode(raw).decode('ascii')
