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

"""
Main abstraction layer for retrieving and storing information about Azure
OS images used by the compute layer.
"""

from concurrent import futures
import threading

from oslo_log import log as logging
from oslo_utils import excutils

from cirrus.common import azure
from cirrus.common import context as cirrus_context
from cirrus.common import exception
from cirrus.common import utils
from cirrus import compute
from cirrus.conf import CONF
from cirrus import datacenter
from cirrus.image import azure as image_azure
from cirrus.image import tasks
from cirrus.objects import fields

LOG = logging.getLogger(__name__)

PROVIDER_TERM = 'OS image'


def _platform_matches(requested, actual):
    if requested is None or requested == fields.Platform.UNKNOWN:
        return True
    if actual == fields.Platform.UNKNOWN:
        return False
    if fields.Platform.is_windows(requested):
        return fields.Platform.is_windows(actual)
    if requested == fields.Platform.UNIX:
        return fields.Platform.is_unix(actual)
    return requested == actual


def _keyword_matches(keyword, image):
    if keyword is None:
        return True
    return (keyword in image.name or
            keyword in image.description or
            keyword in image.id)


class API(object):
    """Responsible for exposing a relatively stable internal API for other
    modules in Cirrus to retrieve information about Azure OS images.

    """

    def __init__(self, client=None, compute_api=None, datacenter_api=None):
        self._client = client or azure.get_client()
        self.catalog = image_azure.ImageCatalog(self._client)
        self.compute_api = compute_api or compute.API(self._client)
        self.datacenter_api = (datacenter_api or
                               datacenter.API(self._client))
        self._capture_pool = None
        self._pool_lock = threading.Lock()

    @property
    def capture_pool(self):
        with self._pool_lock:
            if self._capture_pool is None:
                self._capture_pool = futures.ThreadPoolExecutor(
                    max_workers=CONF.azure.capture_workers,
                    thread_name_prefix='cirrus-capture')
            return self._capture_pool

    def cleanup(self, wait=True):
        """Stop accepting captures and optionally wait for running ones."""
        with self._pool_lock:
            pool, self._capture_pool = self._capture_pool, None
        if pool is not None:
            pool.shutdown(wait=wait)

    def _visible_images(self, context):
        account = cirrus_context.require_account(context)
        return self.catalog.list(context, image_azure.MICROSOFT, account,
                                 image_azure.PUBLIC)

    def list_images(self, context):
        """List the images owned by the caller's own subscription."""
        account = cirrus_context.require_account(context)
        return self.catalog.list(context, account)

    def list_images_owned_by(self, context, account_id=None):
        """List images owned by an account.

        :param context: The request context.
        :param account_id: owner to list; when omitted the Microsoft and
                           public libraries are listed instead.
        """
        cirrus_context.require_account(context)
        if account_id is None:
            accounts = (image_azure.MICROSOFT, image_azure.PUBLIC)
        else:
            accounts = (account_id,)
        return self.catalog.list(context, *accounts)

    def get(self, context, image_id):
        """Retrieves a single image visible to the caller.

        :param context: The request context.
        :param image_id: the Azure image name.
        :returns: the :class:`cirrus.objects.MachineImage`, or None if no
                  visible image has that id.
        """
        for image in self._visible_images(context):
            if image.id == image_id:
                return image
        return None

    def search(self, context, keyword=None, platform=None,
               architecture=None):
        """Search the images visible to the caller.

        :param context: The request context.
        :param keyword: case-sensitive substring of the name, description
                        or id.
        :param platform: a ``fields.Platform`` value; ``windows`` and
                         ``unix`` match their whole family.
        :param architecture: a ``fields.Architecture`` value.
        :returns: matching images in catalog order.
        """
        images = []
        for image in self._visible_images(context):
            if architecture is not None and architecture != image.architecture:
                continue
            if not _platform_matches(platform, image.platform):
                continue
            if not _keyword_matches(keyword, image):
                continue
            images.append(image)
        return images

    def is_image_shared_with_public(self, context, image_id):
        image = self.get(context, image_id)
        return image is not None and image.owner_id in (image_azure.MICROSOFT,
                                                        image_azure.PUBLIC)

    def capture(self, context, server_id, name, description):
        """Capture a stopped virtual machine as a new OS image.

        The server is checked before anything is submitted; the capture
        itself runs on the capture worker pool.

        :param context: The request context.
        :param server_id: ``service:role`` id of the virtual machine.
        :param name: name of the image to create.
        :param description: description, sent as the image label.
        :returns: a :class:`cirrus.image.tasks.CaptureTask` whose result is
                  the new image id.
        :raises: ServerNotFound, InvalidServerState
        """
        cirrus_context.require_account(context)
        server = self.compute_api.get_server(context, server_id)
        if server is None:
            raise exception.ServerNotFound(server=server_id)
        if not server.is_stopped:
            raise exception.InvalidServerState(server=server_id,
                                               state=server.status)

        task = tasks.CaptureTask(server_id, name,
                                 timeout=CONF.azure.capture_timeout or None)
        future = self.capture_pool.submit(self._capture_server, context,
                                          server, name, description, task)
        task.attach(future)
        LOG.info("Submitted capture of server %(server)s to image %(name)s",
                 {'server': server_id, 'name': name})
        return task

    def _capture_server(self, context, server, name, description, task):
        LOG.debug("Capturing server %(server)s to image %(name)s",
                  {'server': server.id, 'name': name})
        try:
            task.check_interrupted()
            account = cirrus_context.require_account(context)
            label = utils.encode_label(description)
            service_name, role_name = utils.split_server_id(server.id)
            body = image_azure.build_capture_request(name, label)

            task.update_progress(tasks.CAPTURE_STARTED)
            task.check_interrupted()
            self._client.post(account,
                              image_azure.capture_resource(service_name,
                                                           role_name),
                              body)
        except Exception:
            with excutils.save_and_reraise_exception():
                LOG.exception("Capture of server %(server)s to image "
                              "%(name)s failed",
                              {'server': server.id, 'name': name})
        # NOTE: Azure does not echo the new image back, the requested name
        # becomes its id.
        return name

    def capture_to_storage(self, context, server_id, name, description,
                           directory):
        raise exception.OperationNotSupported(
            operation='Capturing to a storage directory')

    def delete(self, context, image_id):
        """Delete an OS image the caller can see.

        The VHD blob backing the image is left in storage.

        :raises: ImageNotFound if no visible image has that id.
        """
        account = cirrus_context.require_account(context)
        image = self.get(context, image_id)
        if image is None:
            raise exception.ImageNotFound(image=image_id)
        body = image_azure.build_delete_request(image.name)
        # TODO(cirrus): remove the image VHD blob through the storage
        # service once there is a client for it.
        self._client.delete(account, image_azure.image_resource(image_id),
                            body)
        LOG.info("Deleted OS image %s", image_id)

    def is_subscribed(self, context):
        return self.datacenter_api.is_subscribed(context,
                                                 datacenter.api.COMPUTE)

    def download_image(self, context, image_id, output):
        raise exception.OperationNotSupported(operation='Image download')

    def install_image_from_upload(self, context, image_format, stream):
        raise exception.OperationNotSupported(operation='Image upload')

    def register_machine_image(self, context, location):
        raise exception.OperationNotSupported(
            operation='Image registration')

    def transfer(self, context, from_cloud, image_id):
        raise exception.OperationNotSupported(
            operation='Image transfer between clouds')

    def share_machine_image(self, context, image_id, account_id, allow):
        raise exception.OperationNotSupported(operation='Image sharing')

    def list_shares(self, context, image_id):
        return []

    def list_supported_formats(self):
        # Azure has no import formats; this value is only a placeholder.
        return [fields.ImageFormat.AWS]

    def map_service_action(self, action):
        return []

    def get_provider_term_for_image(self, locale=None):
        return PROVIDER_TERM

    def has_public_library(self):
        return True

    def supports_custom_images(self):
        return True

    def supports_image_sharing(self):
        return False

    def supports_image_sharing_with_public(self):
        return False
