"""
viture-deployer - wireless ADB pairing, connection and APK deployment

Usage:
    from viture_deployer.core.config import load_config
    from viture_deployer.services.context import DeployerContext

    context = DeployerContext.create(load_config())
    await context.connection.connect("192.168.1.20", 5555)
    await context.deploy.install(context.connection.serial, "Builds/Android/MyGame.apk")
    context.close()
"""

__version__ = "0.1.0"
