"""领域层模型与协议。

包含：
- models: Message / MessageContext / SystemState 数据模型。
- conversation: ConversationStore 抽象。
- exceptions: 业务异常与 Provider 错误分类。
"""
