"""Configuration module for Yeehaw.

Provides focused classes for different configuration concerns:
- Config: Main configuration class (aggregates all components)
- SSHConfigParser: Parses ~/.ssh/config files into host descriptors
- HostKeyVerifier: Manages SSH host key verification policy
- Settings: Environment variable configuration
"""

from yeehaw.config.host_keys import HostKeyPolicy, HostKeyVerifier
from yeehaw.config.main import Config
from yeehaw.config.parser import SSHConfigParser
from yeehaw.config.settings import Settings

__all__ = ["Config", "HostKeyPolicy", "HostKeyVerifier", "SSHConfigParser", "Settings"]
