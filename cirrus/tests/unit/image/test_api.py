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

"""Unit tests for the image API."""

import base64
import threading

import mock
from oslo_utils import timeutils

from cirrus.common import azure
from cirrus.common import context as cirrus_context
from cirrus.common import exception
from cirrus.common import states
from cirrus import image
from cirrus.image import azure as image_azure
from cirrus import objects
from cirrus.objects import fields
from cirrus.tests import base
from cirrus.tests.unit import fake_azure


class ImageAPITestCase(base.TestCase):

    def setUp(self):
        super(ImageAPITestCase, self).setUp()
        self.client = azure.AzureClient()
        self.mock_get = self.mock_object(self.client, 'get_as_xml')
        self.mock_get.side_effect = (
            lambda account, resource: azure.parse_xml(fake_azure.CATALOG))
        self.mock_post = self.mock_object(self.client, 'post')
        self.mock_delete = self.mock_object(self.client, 'delete')
        self.compute_api = mock.Mock()
        self.datacenter_api = mock.Mock()
        self.image_api = image.API(client=self.client,
                                   compute_api=self.compute_api,
                                   datacenter_api=self.datacenter_api)
        self.addCleanup(self.image_api.cleanup)

    def _ids(self, images):
        return [img.id for img in images]

    def _server(self, server_id='svcA:roleB', status=states.STOPPED):
        service_name, _sep, role_name = server_id.partition(':')
        return objects.VirtualMachine(
            self.context, id=server_id, name=role_name or server_id,
            service_name=service_name, role_name=role_name or server_id,
            status=status, power_state=states.POWER_OFF)


class ListImagesTestCase(ImageAPITestCase):

    def test_list_images(self):
        self.assertEqual([fake_azure.USER_IMAGE, fake_azure.BLANK_IMAGE],
                         self._ids(self.image_api.list_images(self.context)))

    def test_list_images_without_context(self):
        self.assertRaises(exception.NoContext,
                          self.image_api.list_images, None)
        context = cirrus_context.get_admin_context()
        self.assertRaises(exception.NoContext,
                          self.image_api.list_images, context)
        self.assertFalse(self.mock_get.called)

    def test_list_images_access_denied(self):
        self.mock_get.side_effect = None
        self.mock_get.return_value = None
        self.assertRaises(exception.ImageCatalogAccessDenied,
                          self.image_api.list_images, self.context)

    def test_list_images_owned_by_default(self):
        images = self.image_api.list_images_owned_by(self.context)
        self.assertEqual([fake_azure.WINDOWS_IMAGE,
                          fake_azure.CENTOS_IMAGE,
                          fake_azure.SQL_IMAGE,
                          fake_azure.OTHER_IMAGE], self._ids(images))

    def test_list_images_owned_by_account(self):
        images = self.image_api.list_images_owned_by(self.context,
                                                     '--canonical--')
        self.assertEqual([fake_azure.UBUNTU_IMAGE], self._ids(images))

    def test_every_call_fetches_the_catalog(self):
        self.image_api.list_images(self.context)
        self.image_api.list_images(self.context)
        self.assertEqual(2, self.mock_get.call_count)


class GetImageTestCase(ImageAPITestCase):

    def test_get(self):
        img = self.image_api.get(self.context, fake_azure.CENTOS_IMAGE)
        self.assertEqual(fake_azure.CENTOS_IMAGE, img.id)
        self.assertEqual(image_azure.PUBLIC, img.owner_id)

    def test_get_own_image(self):
        img = self.image_api.get(self.context, fake_azure.USER_IMAGE)
        self.assertEqual(base.FAKE_ACCOUNT, img.owner_id)

    def test_get_missing(self):
        self.assertIsNone(self.image_api.get(self.context, 'nope'))

    def test_get_not_visible(self):
        self.assertIsNone(self.image_api.get(self.context,
                                             fake_azure.UBUNTU_IMAGE))

    def test_is_image_shared_with_public(self):
        self.assertTrue(self.image_api.is_image_shared_with_public(
            self.context, fake_azure.WINDOWS_IMAGE))
        self.assertTrue(self.image_api.is_image_shared_with_public(
            self.context, fake_azure.CENTOS_IMAGE))
        self.assertFalse(self.image_api.is_image_shared_with_public(
            self.context, fake_azure.USER_IMAGE))
        self.assertFalse(self.image_api.is_image_shared_with_public(
            self.context, 'nope'))


class SearchImagesTestCase(ImageAPITestCase):

    def _search(self, **kwargs):
        return self._ids(self.image_api.search(self.context, **kwargs))

    def test_no_filters(self):
        self.assertEqual([fake_azure.USER_IMAGE,
                          fake_azure.WINDOWS_IMAGE,
                          fake_azure.CENTOS_IMAGE,
                          fake_azure.BLANK_IMAGE,
                          fake_azure.SQL_IMAGE,
                          fake_azure.OTHER_IMAGE], self._search())

    def test_windows_family(self):
        self.assertEqual([fake_azure.WINDOWS_IMAGE, fake_azure.SQL_IMAGE],
                         self._search(platform=fields.Platform.WINDOWS))

    def test_unix_family(self):
        self.assertEqual([fake_azure.USER_IMAGE,
                          fake_azure.CENTOS_IMAGE,
                          fake_azure.OTHER_IMAGE],
                         self._search(platform=fields.Platform.UNIX))

    def test_exact_platform(self):
        self.assertEqual([fake_azure.CENTOS_IMAGE],
                         self._search(platform=fields.Platform.CENT_OS))

    def test_unknown_platform_disables_filter(self):
        self.assertEqual(6, len(self._search(
            platform=fields.Platform.UNKNOWN)))

    def test_architecture(self):
        self.assertEqual(6, len(self._search(
            architecture=fields.Architecture.I64)))
        self.assertEqual([], self._search(
            architecture=fields.Architecture.I32))

    def test_keyword_is_case_sensitive(self):
        self.assertEqual([fake_azure.USER_IMAGE],
                         self._search(keyword='web server'))
        self.assertEqual([], self._search(keyword='WEB SERVER'))

    def test_keyword_matches_id(self):
        self.assertEqual([fake_azure.SQL_IMAGE],
                         self._search(keyword='Sql-Server'))

    def test_filters_compose(self):
        self.assertEqual([fake_azure.SQL_IMAGE],
                         self._search(keyword='SQL',
                                      platform=fields.Platform.WINDOWS,
                                      architecture=fields.Architecture.I64))
        self.assertEqual([], self._search(keyword='SQL',
                                          platform=fields.Platform.UNIX))


class CaptureTestCase(ImageAPITestCase):

    def test_server_not_found(self):
        self.compute_api.get_server.return_value = None
        self.assertRaises(exception.ServerNotFound,
                          self.image_api.capture, self.context,
                          'svcA:roleB', 'new-image', 'desc')
        self.assertIsNone(self.image_api._capture_pool)
        self.assertFalse(self.mock_post.called)

    def test_server_not_stopped(self):
        self.compute_api.get_server.return_value = self._server(
            status=states.ACTIVE)
        exc = self.assertRaises(exception.InvalidServerState,
                                self.image_api.capture, self.context,
                                'svcA:roleB', 'new-image', 'desc')
        self.assertIn('must be paused', str(exc))
        self.assertIsNone(self.image_api._capture_pool)
        self.assertFalse(self.mock_post.called)

    def test_capture_service_and_role(self):
        self.compute_api.get_server.return_value = self._server()
        task = self.image_api.capture(self.context, 'svcA:roleB',
                                      'new-image', 'Web server été')
        self.assertEqual('new-image', task.result(timeout=10))
        self.assertEqual(2.0, task.percent_complete)
        self.compute_api.get_server.assert_called_once_with(self.context,
                                                            'svcA:roleB')

        account, resource, body = self.mock_post.call_args[0]
        self.assertEqual(base.FAKE_ACCOUNT, account)
        self.assertEqual('/services/hostedservices/svcA/deployments/svcA/'
                         'roleInstances/roleB/Operations', resource)
        values = azure.child_values(azure.parse_xml(body))
        self.assertEqual('CaptureRoleOperation', values['operationtype'])
        self.assertEqual('Delete', values['postcaptureaction'])
        self.assertEqual('new-image', values['targetimagename'])
        self.assertEqual(
            'Web server été',
            base64.b64decode(values['targetimagelabel']).decode('utf-8'))

    def test_capture_single_id(self):
        self.compute_api.get_server.return_value = self._server('soloId')
        task = self.image_api.capture(self.context, 'soloId', 'new-image',
                                      'desc')
        self.assertEqual('new-image', task.result(timeout=10))
        self.assertEqual('/services/hostedservices/soloId/deployments/'
                         'soloId/roleInstances/soloId/Operations',
                         self.mock_post.call_args[0][1])

    def test_capture_failure(self):
        self.compute_api.get_server.return_value = self._server()
        self.mock_post.side_effect = exception.Conflict()
        task = self.image_api.capture(self.context, 'svcA:roleB',
                                      'new-image', 'desc')
        self.assertRaises(exception.Conflict, task.result, 10)
        self.assertIsInstance(task.exception(), exception.Conflict)

    def test_capture_is_not_idempotent(self):
        self.compute_api.get_server.return_value = self._server()
        first = self.image_api.capture(self.context, 'svcA:roleB',
                                       'new-image', 'desc')
        second = self.image_api.capture(self.context, 'svcA:roleB',
                                        'new-image', 'desc')
        self.assertIsNot(first, second)
        self.assertEqual('new-image', first.result(timeout=10))
        self.assertEqual('new-image', second.result(timeout=10))
        self.assertEqual(2, self.mock_post.call_count)

    @mock.patch.object(timeutils.StopWatch, 'expired', return_value=True)
    def test_capture_deadline(self, mock_expired):
        self.config(capture_timeout=30, group='azure')
        self.compute_api.get_server.return_value = self._server()
        task = self.image_api.capture(self.context, 'svcA:roleB',
                                      'new-image', 'desc')
        self.assertEqual(30, task.timeout)
        self.assertRaises(exception.CaptureTimeout, task.result, 10)
        self.assertFalse(self.mock_post.called)

    def test_capture_cancel_queued(self):
        self.config(capture_workers=1, group='azure')
        self.compute_api.get_server.return_value = self._server()
        started = threading.Event()
        release = threading.Event()

        def _blocking_post(account, resource, body):
            started.set()
            release.wait(10)

        self.mock_post.side_effect = _blocking_post
        first = self.image_api.capture(self.context, 'svcA:roleB',
                                       'first', 'desc')
        self.assertTrue(started.wait(10))
        second = self.image_api.capture(self.context, 'svcA:roleB',
                                        'second', 'desc')
        second.cancel()
        release.set()

        self.assertEqual('first', first.result(timeout=10))
        self.assertRaises(exception.CaptureCancelled, second.result, 10)
        self.assertEqual(1, self.mock_post.call_count)

    def test_capture_to_storage(self):
        self.assertRaises(exception.OperationNotSupported,
                          self.image_api.capture_to_storage, self.context,
                          'svcA:roleB', 'new-image', 'desc', 'vhds')


class DeleteImageTestCase(ImageAPITestCase):

    def test_delete(self):
        self.image_api.delete(self.context, fake_azure.USER_IMAGE)
        account, resource, body = self.mock_delete.call_args[0]
        self.assertEqual(base.FAKE_ACCOUNT, account)
        self.assertEqual('/services/images/my-image', resource)
        self.assertEqual({'label': 'My Image'},
                         azure.child_values(azure.parse_xml(body)))

    def test_delete_not_found(self):
        exc = self.assertRaises(exception.ImageNotFound,
                                self.image_api.delete, self.context, 'nope')
        self.assertIn('nope', str(exc))
        self.assertFalse(self.mock_delete.called)

    def test_delete_twice(self):
        self.image_api.delete(self.context, fake_azure.USER_IMAGE)
        self.mock_get.side_effect = (
            lambda account, resource: azure.parse_xml(fake_azure.images()))
        self.assertRaises(exception.ImageNotFound,
                          self.image_api.delete, self.context,
                          fake_azure.USER_IMAGE)
        self.assertEqual(1, self.mock_delete.call_count)

    def test_delete_failure_propagates(self):
        self.mock_delete.side_effect = exception.Conflict()
        self.assertRaises(exception.Conflict, self.image_api.delete,
                          self.context, fake_azure.USER_IMAGE)


class CapabilitiesTestCase(ImageAPITestCase):

    def test_flags(self):
        self.assertTrue(self.image_api.has_public_library())
        self.assertTrue(self.image_api.supports_custom_images())
        self.assertFalse(self.image_api.supports_image_sharing())
        self.assertFalse(self.image_api.supports_image_sharing_with_public())

    def test_metadata(self):
        self.assertEqual('OS image',
                         self.image_api.get_provider_term_for_image())
        self.assertEqual('OS image',
                         self.image_api.get_provider_term_for_image('fr'))
        self.assertEqual(['aws'], self.image_api.list_supported_formats())
        self.assertEqual([], self.image_api.list_shares(
            self.context, fake_azure.USER_IMAGE))
        self.assertEqual([], self.image_api.map_service_action('create'))

    def test_unsupported_operations(self):
        calls = [
            (self.image_api.download_image, ('my-image', mock.Mock())),
            (self.image_api.install_image_from_upload, ('vhd', mock.Mock())),
            (self.image_api.register_machine_image, ('http://x/a.vhd',)),
            (self.image_api.transfer, ('other-cloud', 'my-image')),
            (self.image_api.share_machine_image,
             ('my-image', 'other-account', True)),
        ]
        for method, args in calls:
            self.assertRaises(exception.OperationNotSupported,
                              method, self.context, *args)
        self.assertFalse(self.mock_get.called)

    def test_is_subscribed(self):
        self.datacenter_api.is_subscribed.return_value = True
        self.assertTrue(self.image_api.is_subscribed(self.context))
        self.datacenter_api.is_subscribed.assert_called_once_with(
            self.context, 'compute')
