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

"""Translation between the Azure OS image catalog and MachineImage objects.

Ownership and platform are derived from explicit mapping tables; free text
is only consulted through :func:`cirrus.common.utils.guess_platform`.
"""

from oslo_log import log as logging

from cirrus.common import azure
from cirrus.common import exception
from cirrus.common import states
from cirrus.common import utils
from cirrus import objects
from cirrus.objects import fields

LOG = logging.getLogger(__name__)

IMAGES = '/services/images'
HOSTED_SERVICES = '/services/hostedservices'

# Owner sentinels standing in for an account id.
MICROSOFT = '--microsoft--'
PUBLIC = '--public--'
CANONICAL = '--Canonical--'

USER_CATEGORY = 'user'

_OWNER_MAP = {
    'microsoft': MICROSOFT,
    'partner': PUBLIC,
    'canonical': CANONICAL,
}

_OS_MAP = {
    'windows': fields.Platform.WINDOWS,
    'linux': fields.Platform.UNIX,
}

SQL_SERVER = 'SQL Server'

CAPTURE_OPERATION = 'CaptureRoleOperation'
POST_CAPTURE_ACTION = 'Delete'


def owner_from_category(category, account_number):
    """Map an image ``Category`` onto an owner id.

    ``user`` images belong to the caller; everything unknown or missing is
    treated as Microsoft's.
    """
    if category is None:
        return MICROSOFT
    category = category.lower()
    if category == USER_CATEGORY:
        return account_number
    return _OWNER_MAP.get(category, MICROSOFT)


def platform_from_os(os_type):
    """Map an image ``OS`` value onto a platform, None if unrecognised."""
    if os_type is None:
        return None
    return _OS_MAP.get(os_type.lower())


def resolve_platform(explicit, descriptor):
    """Refine the explicit platform with a guess from the descriptor.

    A missing platform always takes the guess, even an unknown one. A
    generic unix platform only takes a guess that names something.
    """
    if explicit is None or explicit == fields.Platform.UNIX:
        guessed = utils.guess_platform(descriptor)
        if explicit is None or guessed != fields.Platform.UNKNOWN:
            return guessed
    return explicit


def _translate_from_azure(context, values):
    image_id = values.get('name')
    if not image_id:
        LOG.warning("Ignoring OS image without a name: %s", values)
        return None

    name = values.get('label')
    if name is None:
        name = image_id
    description = values.get('description')
    if description is None:
        description = name

    image = objects.MachineImage(
        context,
        id=image_id,
        name=name,
        description=description,
        owner_id=owner_from_category(values.get('category'),
                                     context.account_number),
        architecture=fields.Architecture.I64,
        status=states.IMAGE_ACTIVE,
        region_id=context.region_id,
        media_link=values.get('medialink'),
        image_type=fields.ImageType.STORAGE,
        tags={})
    descriptor = image.descriptor
    image.platform = resolve_platform(platform_from_os(values.get('os')),
                                      descriptor)
    image.software = SQL_SERVER if SQL_SERVER in descriptor else ''
    return image


def capture_resource(service_name, role_name):
    return ('%(hosted)s/%(service)s/deployments/%(service)s/roleInstances/'
            '%(role)s/Operations' % {'hosted': HOSTED_SERVICES,
                                      'service': service_name,
                                      'role': role_name})


def image_resource(image_id):
    return '%s/%s' % (IMAGES, image_id)


def build_capture_request(name, label):
    root = azure.new_document(CAPTURE_OPERATION)
    azure.add_value(root, 'OperationType', CAPTURE_OPERATION)
    azure.add_value(root, 'PostCaptureAction', POST_CAPTURE_ACTION)
    azure.add_value(root, 'TargetImageLabel', label)
    azure.add_value(root, 'TargetImageName', name)
    return azure.to_xml(root)


def build_delete_request(label):
    root = azure.new_document('OSImage')
    azure.add_value(root, 'Label', label)
    return azure.to_xml(root)


class ImageCatalog(object):
    """The full OS image catalog of a subscription.

    There is no server side filtering: every call downloads the whole
    catalog and filters by owner on this side.
    """

    def __init__(self, client):
        self._client = client

    def list(self, context, *accounts):
        """Return the catalog images owned by any of ``accounts``.

        :param context: The request context.
        :param accounts: owner ids or sentinels, compared case-insensitively.
        :returns: list of :class:`cirrus.objects.MachineImage` in document
                  order.
        :raises: ImageCatalogAccessDenied if no catalog document came back.
        """
        with self._client.hold():
            doc = self._client.get_as_xml(context.account_number, IMAGES)
        if doc is None:
            raise exception.ImageCatalogAccessDenied(resource=IMAGES)

        images = []
        for entry in azure.find_elements(doc, 'OSImage'):
            image = _translate_from_azure(context, azure.child_values(entry))
            if image is not None and image.is_owned_by(*accounts):
                images.append(image)
        LOG.debug("%(count)d OS images owned by %(accounts)s",
                  {'count': len(images), 'accounts': accounts})
        return images
