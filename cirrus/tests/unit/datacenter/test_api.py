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

from cirrus.common import azure
from cirrus.common import exception
from cirrus import datacenter
from cirrus.tests import base
from cirrus.tests.unit import fake_azure


class DatacenterAPITestCase(base.TestCase):

    def setUp(self):
        super(DatacenterAPITestCase, self).setUp()
        self.client = azure.AzureClient()
        self.mock_get = self.mock_object(self.client, 'get_as_xml')
        self.datacenter_api = datacenter.API(self.client)

    def _subscription(self, status):
        self.mock_get.return_value = azure.parse_xml(
            fake_azure.subscription(status))

    def test_active(self):
        self._subscription('Active')
        self.assertTrue(self.datacenter_api.is_subscribed(self.context))
        self.mock_get.assert_called_once_with(base.FAKE_ACCOUNT, '')

    def test_storage(self):
        self._subscription('Active')
        self.assertTrue(self.datacenter_api.is_subscribed(
            self.context, datacenter.api.STORAGE))

    def test_disabled(self):
        self._subscription('Disabled')
        self.assertFalse(self.datacenter_api.is_subscribed(self.context))

    def test_no_document(self):
        self.mock_get.return_value = None
        self.assertFalse(self.datacenter_api.is_subscribed(self.context))

    def test_not_authorized(self):
        self.mock_get.side_effect = exception.NotAuthorized()
        self.assertFalse(self.datacenter_api.is_subscribed(self.context))
        self.assertEqual(0, self.client.active_holds)

    def test_other_errors_propagate(self):
        self.mock_get.side_effect = exception.AzureConnectionFailed(
            server='x', reason='down')
        self.assertRaises(exception.AzureConnectionFailed,
                          self.datacenter_api.is_subscribed, self.context)

    def test_unknown_service(self):
        self.assertFalse(self.datacenter_api.is_subscribed(self.context,
                                                           'dns'))
        self.assertFalse(self.mock_get.called)
