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
from cirrus.objects import base
from cirrus.objects import fields as object_fields


@base.CirrusObjectRegistry.register
class VirtualMachine(base.CirrusObject):
    # Version 1.0: Initial version
    VERSION = '1.0'

    fields = {
        'id': object_fields.StringField(nullable=False),
        'name': object_fields.StringField(nullable=True),
        'service_name': object_fields.StringField(nullable=False),
        'role_name': object_fields.StringField(nullable=False),
        'status': object_fields.ServerStateField(),
        'power_state': object_fields.StringField(nullable=True),
    }

    @property
    def is_stopped(self):
        return self.status == states.STOPPED
