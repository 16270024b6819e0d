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

from cirrus.common import states
from cirrus import objects
from cirrus.objects import fields
from cirrus.tests import base


class MachineImageTestCase(base.TestCase):

    def _image(self, **kwargs):
        values = {'id': 'my-image', 'name': 'My Image',
                  'description': 'Ubuntu web server',
                  'owner_id': base.FAKE_ACCOUNT}
        values.update(kwargs)
        return objects.MachineImage(self.context, **values)

    def test_descriptor(self):
        self.assertEqual('my-image My Image Ubuntu web server',
                         self._image().descriptor)

    def test_is_owned_by(self):
        image = self._image(owner_id='--Canonical--')
        self.assertTrue(image.is_owned_by('--canonical--'))
        self.assertTrue(image.is_owned_by('--microsoft--', '--CANONICAL--'))
        self.assertFalse(image.is_owned_by('--microsoft--'))
        self.assertFalse(image.is_owned_by())
        self.assertFalse(image.is_owned_by(None))

    def test_platform_is_validated(self):
        image = self._image()
        image.platform = fields.Platform.COREOS
        self.assertEqual('coreos', image.platform)
        self.assertRaises(ValueError, setattr, image, 'platform', 'amiga')

    def test_as_dict(self):
        image = self._image()
        self.assertEqual({'id': 'my-image', 'name': 'My Image',
                          'description': 'Ubuntu web server',
                          'owner_id': base.FAKE_ACCOUNT}, image.as_dict())


class VirtualMachineTestCase(base.TestCase):

    def test_is_stopped(self):
        server = objects.VirtualMachine(self.context, id='svcA:roleB',
                                        service_name='svcA',
                                        role_name='roleB',
                                        status=states.STOPPED)
        self.assertTrue(server.is_stopped)
        server.status = states.ACTIVE
        self.assertFalse(server.is_stopped)

    def test_status_is_validated(self):
        server = objects.VirtualMachine(self.context)
        self.assertRaises(ValueError, setattr, server, 'status', 'paused')
