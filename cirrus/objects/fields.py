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

from oslo_versionedobjects import fields

from cirrus.common import states


DictOfStringsField = fields.DictOfStringsField
StringField = fields.StringField


class Platform(fields.Enum):
    UNIX = 'unix'
    UBUNTU = 'ubuntu'
    DEBIAN = 'debian'
    CENT_OS = 'centos'
    RHEL = 'rhel'
    FEDORA_CORE = 'fedora'
    SUSE = 'suse'
    COREOS = 'coreos'
    FREE_BSD = 'freebsd'
    SOLARIS = 'solaris'
    WINDOWS = 'windows'
    UNKNOWN = 'unknown'

    UNIX_FAMILY = (UNIX, UBUNTU, DEBIAN, CENT_OS, RHEL, FEDORA_CORE, SUSE,
                   COREOS, FREE_BSD, SOLARIS)
    WINDOWS_FAMILY = (WINDOWS,)

    ALL = UNIX_FAMILY + WINDOWS_FAMILY + (UNKNOWN,)

    def __init__(self):
        super(Platform, self).__init__(valid_values=Platform.ALL)

    @staticmethod
    def is_windows(platform):
        return platform in Platform.WINDOWS_FAMILY

    @staticmethod
    def is_unix(platform):
        return platform in Platform.UNIX_FAMILY


class PlatformField(fields.BaseEnumField):
    AUTO_TYPE = Platform()


class Architecture(fields.Enum):
    I32 = 'i386'
    I64 = 'x86_64'

    ALL = (I32, I64)

    def __init__(self):
        super(Architecture, self).__init__(valid_values=Architecture.ALL)


class ArchitectureField(fields.BaseEnumField):
    AUTO_TYPE = Architecture()


class ImageType(fields.Enum):
    STORAGE = 'storage'
    VOLUME = 'volume'

    ALL = (STORAGE, VOLUME)

    def __init__(self):
        super(ImageType, self).__init__(valid_values=ImageType.ALL)


class ImageTypeField(fields.BaseEnumField):
    AUTO_TYPE = ImageType()


class ImageFormat(fields.Enum):
    AWS = 'aws'
    VHD = 'vhd'

    ALL = (AWS, VHD)

    def __init__(self):
        super(ImageFormat, self).__init__(valid_values=ImageFormat.ALL)


class ImageState(fields.Enum):
    ALL = states.IMAGE_STATES

    def __init__(self):
        super(ImageState, self).__init__(valid_values=ImageState.ALL)


class ImageStateField(fields.BaseEnumField):
    AUTO_TYPE = ImageState()


class ServerState(fields.Enum):
    ALL = states.SERVER_STATES

    def __init__(self):
        super(ServerState, self).__init__(valid_values=ServerState.ALL)


class ServerStateField(fields.BaseEnumField):
    AUTO_TYPE = ServerState()
