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

from cirrus.objects import base
from cirrus.objects import fields as object_fields


@base.CirrusObjectRegistry.register
class MachineImage(base.CirrusObject):
    """An Azure OS image as seen through the vendor-neutral model.

    Built fresh from one ``OSImage`` catalog entry per call and never
    persisted.
    """
    # Version 1.0: Initial version
    VERSION = '1.0'

    fields = {
        'id': object_fields.StringField(nullable=False),
        'name': object_fields.StringField(nullable=False),
        'description': object_fields.StringField(nullable=False),
        'owner_id': object_fields.StringField(nullable=True),
        'platform': object_fields.PlatformField(),
        'architecture': object_fields.ArchitectureField(),
        'status': object_fields.ImageStateField(),
        'region_id': object_fields.StringField(nullable=True),
        'media_link': object_fields.StringField(nullable=True),
        'software': object_fields.StringField(),
        'image_type': object_fields.ImageTypeField(),
        'tags': object_fields.DictOfStringsField(),
    }

    @property
    def descriptor(self):
        """Free text the platform and software heuristics look at."""
        return '%s %s %s' % (self.id, self.name, self.description)

    def is_owned_by(self, *accounts):
        owner = (self.owner_id or '').lower()
        return any(owner == account.lower()
                   for account in accounts if account)
