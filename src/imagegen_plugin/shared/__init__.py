"""共享模块：图像 provider、提示词解析、响应格式化。"""
